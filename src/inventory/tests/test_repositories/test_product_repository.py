import pytest

from inventory.exceptions import FailureKind, KnownFailure


@pytest.mark.asyncio
class TestCreateWithCategories:

    async def test_preserves_category_order(self, product_repo, seeded_categories, db_session):
        ordered = [seeded_categories["Toys"], seeded_categories["Books"], seeded_categories["Beauty"]]

        product = await product_repo.create_with_categories("Widget", "A widget for tests", 3, ordered)
        await db_session.commit()

        assert [c.name for c in product.categories] == ["Toys", "Books", "Beauty"]

    async def test_reloaded_product_keeps_order(self, product_repo, seeded_categories, db_session):
        ordered = [seeded_categories["Sports"], seeded_categories["Clothing"]]
        product = await product_repo.create_with_categories("Widget", "A widget for tests", 3, ordered)
        await db_session.commit()
        db_session.expunge_all()

        reloaded = await product_repo.get_by_id(product.id)

        assert [c.name for c in reloaded.categories] == ["Sports", "Clothing"]

    async def test_exact_duplicate_name_hits_unique_index(self, make_product, product_repo, seeded_categories):
        await make_product("Widget")

        with pytest.raises(KnownFailure) as exc_info:
            await product_repo.create_with_categories(
                "Widget", "Another widget", 1, [seeded_categories["Books"]]
            )

        assert exc_info.value.kind is FailureKind.DUPLICATE_KEY
        assert exc_info.value.field == "name"
        assert exc_info.value.value == "Widget"


@pytest.mark.asyncio
class TestFindByName:

    async def test_case_insensitive(self, make_product, product_repo):
        await make_product("Widget")

        assert (await product_repo.find_by_name_insensitive("wIdGeT")).name == "Widget"
        assert await product_repo.find_by_name_insensitive("Gadget") is None

    async def test_both_sides_folded_by_the_store(self, make_product, product_repo):
        await make_product("ÉCOLE Kit")

        found = await product_repo.find_by_name_insensitive("ÉCOLE kit")

        assert found is not None and found.name == "ÉCOLE Kit"


@pytest.mark.asyncio
class TestSearch:

    async def test_newest_first(self, make_product, product_repo):
        for name in ("First", "Second", "Third"):
            await make_product(name)

        names = [p.name for p in await product_repo.search()]

        assert names == ["Third", "Second", "First"]

    async def test_pagination(self, make_product, product_repo):
        for i in range(12):
            await make_product(f"Product {i:02d}")

        second_page = await product_repo.search(page=2, limit=10)

        assert [p.name for p in second_page] == ["Product 01", "Product 00"]
        assert await product_repo.count_matching() == 12

    async def test_search_is_case_insensitive_substring(self, make_product, product_repo):
        await make_product("Blue Widget")
        await make_product("Red widget")
        await make_product("Gadget")

        found = {p.name for p in await product_repo.search(search="WIDG")}

        assert found == {"Blue Widget", "Red widget"}
        assert await product_repo.count_matching(search="WIDG") == 2

    async def test_search_treats_wildcards_literally(self, make_product, product_repo):
        await make_product("100% Cotton")
        await make_product("Cotton Blend")

        found = [p.name for p in await product_repo.search(search="100%")]

        assert found == ["100% Cotton"]

    async def test_category_filter_matches_any(self, make_product, product_repo, seeded_categories):
        await make_product("Novel", categories=["Books"])
        await make_product("Ball", categories=["Sports", "Toys"])
        await make_product("Laptop", categories=["Electronics"])

        ids = [seeded_categories["Books"].id, seeded_categories["Toys"].id]
        found = {p.name for p in await product_repo.search(category_ids=ids)}

        assert found == {"Novel", "Ball"}
        assert await product_repo.count_matching(category_ids=ids) == 2

    async def test_search_and_category_combined(self, make_product, product_repo, seeded_categories):
        await make_product("Toy Car", categories=["Toys"])
        await make_product("Toy Book", categories=["Books"])

        found = [p.name for p in await product_repo.search(search="toy", category_ids=[seeded_categories["Books"].id])]

        assert found == ["Toy Book"]


@pytest.mark.asyncio
class TestDeleteProduct:

    async def test_delete_removes_product_and_links(self, make_product, product_repo, db_session):
        product = await make_product("Widget", categories=["Books", "Toys"])

        deleted = await product_repo.delete_product(product)
        await db_session.commit()

        assert deleted.name == "Widget"
        assert [c.name for c in deleted.categories] == ["Books", "Toys"]
        assert await product_repo.get_by_id(product.id) is None
        assert await product_repo.count_matching() == 0

# tests/unit/test_entity_patch.py
from src.fm_cache.domain.patch import EntityPatch


def _value() -> dict:
    return {
        "farmer_id": "f1",
        "products": [
            {"id": "p1", "price": 100, "stock": 5},
            {"_id": "p2", "price": 200, "stock": 0},
        ],
    }


class TestApply:
    def test_merges_fields_into_matching_entities(self):
        patched = EntityPatch.for_entities(["p1", "p2"], {"stock": 9}).apply(_value())
        assert [p["stock"] for p in patched["products"]] == [9, 9]
        assert patched["farmer_id"] == "f1"

    def test_leaves_other_entities_alone(self):
        patched = EntityPatch.for_entities(["p2"], {"price": 250}).apply(_value())
        assert patched["products"][0] == {"id": "p1", "price": 100, "stock": 5}
        assert patched["products"][1]["price"] == 250

    def test_does_not_mutate_input(self):
        value = _value()
        EntityPatch.for_entities(["p1"], {"price": 1}).apply(value)
        assert value == _value()

    def test_passes_through_values_without_collection(self):
        patch = EntityPatch.for_entities(["p1"], {"price": 1})
        assert patch.apply(None) is None
        assert patch.apply({"stats": {}}) == {"stats": {}}
        assert patch.apply({"products": "oops"}) == {"products": "oops"}

    def test_other_collection_name(self):
        patch = EntityPatch.for_entities(["o1"], {"status": "shipped"}, collection="orders")
        value = {"orders": [{"id": "o1", "status": "pending"}]}
        assert patch.apply(value)["orders"][0]["status"] == "shipped"


class TestConfirm:
    def test_server_fields_win(self):
        patch = EntityPatch.for_entities(["p1"], {"price": 150})
        confirmed = patch.confirm(_value(), [{"id": "p1", "price": 149, "updated_at": "t"}])
        assert confirmed["products"][0] == {"id": "p1", "price": 149, "stock": 5, "updated_at": "t"}

    def test_without_server_entities_keeps_patch(self):
        patch = EntityPatch.for_entities(["p1"], {"price": 150})
        assert patch.confirm(_value(), None)["products"][0]["price"] == 150

    def test_server_entities_match_by_underscore_id(self):
        patch = EntityPatch.for_entities(["p2"], {"stock": 1})
        confirmed = patch.confirm(_value(), [{"_id": "p2", "stock": 2}])
        assert confirmed["products"][1]["stock"] == 2

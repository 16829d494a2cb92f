"""Tests for the capped JSON stores."""
from digicraft.content import build_product
from digicraft.schemas import AILogEntry, GeneratedSection, SetupConfiguration
from digicraft.store import AILogStore, ConfigurationStore, ProductStore


def _product(name):
    section = GeneratedSection(section_name="S", elements=[{"question": "Q?"}])
    return build_product("questions", [section], {"role": "CTO"}, name=name)


class TestProductStore:

    def test_insert_and_get(self, db_session):
        store = ProductStore(db_session)
        product = store.insert(_product("One"))
        loaded = store.get(product.id)
        assert loaded == product
        assert store.get("prod-missing") is None

    def test_newest_first(self, db_session):
        store = ProductStore(db_session)
        first = store.insert(_product("First"))
        second = store.insert(_product("Second"))
        assert [p.id for p in store.all()] == [second.id, first.id]

    def test_fifo_eviction(self, db_session):
        store = ProductStore(db_session, capacity=2)
        oldest = store.insert(_product("A"))
        store.insert(_product("B"))
        store.insert(_product("C"))
        names = [p.name for p in store.all()]
        assert names == ["C", "B"]
        assert store.get(oldest.id) is None

    def test_update_and_remove(self, db_session):
        store = ProductStore(db_session)
        product = store.insert(_product("Draft"))
        product.name = "Renamed"
        store.update(product)
        assert store.get(product.id).name == "Renamed"
        assert store.remove(product.id) is True
        assert store.remove(product.id) is False
        assert store.update(product) is None

    def test_clear(self, db_session):
        store = ProductStore(db_session)
        store.insert(_product("A"))
        store.insert(_product("B"))
        assert store.clear() == 2
        assert store.all() == []


class TestConfigurationStore:

    def test_save_assigns_id_and_upserts(self, db_session):
        store = ConfigurationStore(db_session)
        config = store.save(SetupConfiguration(name="Board prep", context={"role": "CEO"}))
        assert config.id.startswith("cfg-")
        assert config.created_at == config.updated_at

        config.name = "Board prep v2"
        store.save(config)
        saved = store.all()
        assert len(saved) == 1
        assert saved[0].name == "Board prep v2"
        assert saved[0].created_at == config.created_at

    def test_capacity(self, db_session):
        store = ConfigurationStore(db_session, capacity=1)
        store.save(SetupConfiguration(name="Old"))
        store.save(SetupConfiguration(name="New"))
        assert [c.name for c in store.all()] == ["New"]


class TestAILogStore:

    def test_capacity(self, db_session):
        store = AILogStore(db_session, capacity=3)
        for i in range(5):
            store.insert(AILogEntry(id=f"log-{i}", timestamp="t", action="Generate", route="generate-questions"))
        assert [e.id for e in store.all()] == ["log-4", "log-3", "log-2"]

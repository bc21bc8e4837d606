"""
Unit tests for the record sinks.

Driver-facing sinks are exercised against unittest.mock doubles of the
pymongo client and the cassandra-driver session.
"""

import threading
from datetime import UTC, datetime
from unittest.mock import MagicMock, PropertyMock

import pytest
from cassandra.query import UNSET_VALUE, dict_factory
from pymongo import ASCENDING
from pymongo.errors import AutoReconnect

from varejo_datagen.config.models import CassandraConfig, MongoConfig
from varejo_datagen.services.writers import (
    CassandraWideColumnSink,
    InMemorySink,
    MongoDocumentSink,
)
from varejo_datagen.services.writers.wide_column_writer import create_table_cql, table_columns
from varejo_datagen.shared.exceptions import SinkError
from varejo_datagen.shared.models import ENTITY_MODELS, InvoiceLine, Product, Terminal


def _product_record(**overrides) -> dict:
    product = Product(
        product_id=5, name="Campo Bom Arroz Tipo 1", supplier_id=2, sector_id=1,
        unit_id=1, fractional=False, sale_price=15.0, cost=10.0, average_price=12.5,
        **overrides,
    )
    return product.to_record()


class TestInMemorySink:
    """Dict-backed sink."""

    def test_upsert_and_read(self):
        sink = InMemorySink()
        sink.upsert("produto", _product_record())
        assert sink.bulk_read("produto") == [_product_record()]
        assert sink.bulk_read("cliente") == []

    def test_composite_keys(self):
        sink = InMemorySink()
        sink.upsert("item_nota_fiscal", {"seq_nota": 1, "seq_item_nota": 1, "qtd_produto": 1.0})
        sink.upsert("item_nota_fiscal", {"seq_nota": 1, "seq_item_nota": 2, "qtd_produto": 2.0})
        assert sink.get("item_nota_fiscal", (1, 2))["qtd_produto"] == 2.0
        assert sink.count("item_nota_fiscal") == 2

    def test_unknown_table(self):
        with pytest.raises(SinkError, match="Unknown table"):
            InMemorySink().upsert("truck", {"id": 1})

    def test_missing_key_column(self):
        with pytest.raises(SinkError, match="missing key column"):
            InMemorySink().upsert("produto", {"nom_produto": "x"})

    def test_concurrent_upserts(self):
        sink = InMemorySink()

        def write(offset):
            for i in range(200):
                sink.upsert("produto", _product_record() | {"cod_produto": offset + i})

        threads = [threading.Thread(target=write, args=(n * 1000,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sink.count("produto") == 800

    def test_stored_copy_is_isolated(self):
        sink = InMemorySink()
        record = _product_record()
        sink.upsert("produto", record)
        record["nom_produto"] = "changed"
        assert sink.get("produto", 5)["nom_produto"] == "Campo Bom Arroz Tipo 1"


class TestMongoDocumentSink:
    """pymongo-backed sink."""

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def sink(self, client):
        return MongoDocumentSink(MongoConfig(), client=client)

    def test_upsert_replaces_by_key(self, sink, client):
        record = _product_record()
        sink.upsert("produto", record)

        collection = client["varejo"]["produto"]
        collection.replace_one.assert_called_once_with({"cod_produto": 5}, record, upsert=True)

    def test_composite_key_filter(self, sink, client):
        record = {"seq_nota": 3, "seq_item_nota": 1, "qtd_produto": 1.0}
        sink.upsert("item_nota_fiscal", record)

        collection = client["varejo"]["item_nota_fiscal"]
        args, kwargs = collection.replace_one.call_args
        assert args[0] == {"seq_nota": 3, "seq_item_nota": 1}

    def test_driver_error_wrapped(self, sink, client):
        client["varejo"]["produto"].replace_one.side_effect = AutoReconnect("reset")

        with pytest.raises(SinkError) as exc_info:
            sink.upsert("produto", _product_record())

        assert exc_info.value.sink == "mongodb"
        assert exc_info.value.table == "produto"
        assert isinstance(exc_info.value.original_error, AutoReconnect)

    def test_bulk_read_excludes_object_id(self, sink, client):
        client["varejo"]["produto"].find.return_value = iter([_product_record()])

        rows = sink.bulk_read("produto")

        client["varejo"]["produto"].find.assert_called_once_with({}, {"_id": 0})
        assert rows == [_product_record()]

    def test_ensure_indexes(self, sink, client):
        sink.ensure_indexes()

        client["varejo"]["item_nota_fiscal"].create_index.assert_any_call(
            [("seq_nota", ASCENDING), ("seq_item_nota", ASCENDING)], unique=True
        )
        client["varejo"]["cidade"].create_index.assert_any_call(
            [("cod_ibge", ASCENDING)], unique=True
        )

    def test_injected_client_not_closed(self, sink, client):
        sink.close()
        client.close.assert_not_called()


class TestWideColumnSchema:
    """DDL derived from the entity models."""

    def test_columns_follow_model_fields(self):
        assert table_columns(Terminal) == [
            ("cod_pdv", "int"),
            ("num_registro", "int"),
            ("dat_inicio_vigencia", "timestamp"),
            ("dat_fim_vigencia", "timestamp"),
            ("num_nota_inicial", "int"),
            ("num_nota_final", "int"),
            ("cod_loja", "int"),
            ("num_pdv_loja", "int"),
        ]

    def test_optional_and_flag_columns(self):
        columns = dict(table_columns(Product))
        assert columns["flg_fracionado"] == "text"
        assert columns["vlr_promocao"] == "double"
        assert columns["cod_promocao"] == "int"

    def test_composite_primary_key(self):
        cql = create_table_cql("meu_keyspace", InvoiceLine)
        assert cql.startswith("CREATE TABLE IF NOT EXISTS meu_keyspace.item_nota_fiscal (")
        assert cql.endswith("PRIMARY KEY ((seq_nota), seq_item_nota))")

    def test_every_model_has_ddl(self):
        for model in ENTITY_MODELS.values():
            assert f"meu_keyspace.{model.table_name}" in create_table_cql("meu_keyspace", model)


class TestCassandraWideColumnSink:
    """cassandra-driver-backed sink."""

    @pytest.fixture
    def session(self):
        return MagicMock()

    @pytest.fixture
    def sink(self, session):
        return CassandraWideColumnSink(CassandraConfig(), session=session)

    def test_prepares_insert_once_per_table(self, sink, session):
        sink.upsert("produto", _product_record())
        sink.upsert("produto", _product_record() | {"cod_produto": 6})

        session.prepare.assert_called_once()
        statement = session.prepare.call_args.args[0]
        assert statement.startswith("INSERT INTO meu_keyspace.produto (cod_produto, nom_produto")
        assert session.execute.call_count == 2

    def test_absent_optional_columns_unset(self, sink, session):
        sink.upsert("produto", _product_record())

        values = session.execute.call_args.args[1]
        columns = [name for name, _ in table_columns(Product)]
        bound = dict(zip(columns, values))
        assert bound["cod_promocao"] is UNSET_VALUE
        assert bound["vlr_promocao"] is UNSET_VALUE
        assert bound["vlr_venda"] == 15.0
        assert bound["flg_fracionado"] == "N"

    def test_present_promotion_bound(self, sink, session):
        sink.upsert("produto", _product_record(promotion_id=2, promotion_price=10.5))

        values = session.execute.call_args.args[1]
        assert 10.5 in values
        assert UNSET_VALUE not in values

    def test_consistency_applied(self, session):
        from cassandra import ConsistencyLevel

        sink = CassandraWideColumnSink(CassandraConfig(consistency="one"), session=session)
        sink.upsert("produto", _product_record())
        assert session.prepare.return_value.consistency_level == ConsistencyLevel.ONE

    def test_driver_error_wrapped(self, sink, session):
        from cassandra import OperationTimedOut

        session.execute.side_effect = OperationTimedOut("timed out")
        with pytest.raises(SinkError) as exc_info:
            sink.upsert("produto", _product_record())
        assert exc_info.value.key == (5,)
        assert exc_info.value.sink == "cassandra"

    def test_bulk_read_drops_null_columns(self, sink, session):
        session.execute.return_value = [
            {"cod_produto": 5, "nom_produto": "x", "vlr_promocao": None},
        ]
        assert sink.bulk_read("produto") == [{"cod_produto": 5, "nom_produto": "x"}]
        session.execute.assert_called_once_with("SELECT * FROM meu_keyspace.produto")

    def test_row_factory_set_once_at_construction(self, sink, session):
        assert session.row_factory is dict_factory

        row_factory = PropertyMock(return_value=dict_factory)
        type(session).row_factory = row_factory
        session.execute.return_value = []
        sink.bulk_read("produto")
        sink.upsert("produto", _product_record())

        row_factory.assert_not_called()

    def test_create_schema(self, sink, session):
        sink.create_schema()

        statements = [c.args[0] for c in session.execute.call_args_list]
        assert statements[0].startswith("CREATE KEYSPACE IF NOT EXISTS meu_keyspace")
        assert "'replication_factor': 1" in statements[0]
        assert len(statements) == 1 + len(ENTITY_MODELS)

    def test_timestamps_bound_as_datetimes(self, sink, session):
        record = Terminal(
            terminal_id=1, register_number=1234,
            valid_from=datetime(2023, 1, 1, tzinfo=UTC),
            valid_until=datetime(2028, 1, 1, tzinfo=UTC),
            first_invoice_number=1, last_invoice_number=2000, store_id=1, terminal_number=1,
        ).to_record()
        sink.upsert("pdv", record)
        values = session.execute.call_args.args[1]
        assert values[2] == datetime(2023, 1, 1, tzinfo=UTC)

    def test_unknown_table(self, sink):
        with pytest.raises(SinkError, match="Unknown table"):
            sink.upsert("truck", {})

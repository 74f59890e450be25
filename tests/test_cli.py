# ==============================================
# Tests for CLI
# ==============================================

import json
from unittest.mock import AsyncMock, patch

import pytest

from schema_sampler import cli
from schema_sampler.aggregation import SchemaAggregate
from schema_sampler.errors import DataSourceError, InferenceCancelled
from schema_sampler.extraction import TypeTag
from schema_sampler.schema_inference import InferenceResult


@pytest.fixture
def result():
    return InferenceResult(
        aggregate=SchemaAggregate(types={
            "name": frozenset({TypeTag.STRING, TypeTag.MISSING}),
            "age": frozenset({TypeTag.INTEGER}),
        }),
        document_count=3,
        sample_size=10000,
        documents_sampled=3,
        distinct_shapes=2,
    )


class TestOverrides:

    def test_flags_override_config(self, config):
        args = cli.build_parser().parse_args([
            "infer", "--collection", "users", "--database", "app",
            "--sample-size", "20", "--query", '{"a": 1}',
            "--server-side", "--per-field-results",
        ])
        updated = cli.apply_overrides(config, args)
        assert updated.mongo.collection == "users"
        assert updated.mongo.database == "app"
        assert updated.sampling.default_sample_size == 20
        assert updated.sampling.query == {"a": 1}
        assert updated.sampling.server_side is True
        assert updated.sampling.group_results is False

    def test_no_flags_keep_config(self, config):
        args = cli.build_parser().parse_args(["infer"])
        updated = cli.apply_overrides(config, args)
        assert updated.mongo == config.mongo
        assert updated.sampling == config.sampling

    def test_json_output_is_quiet(self, config):
        config.verbose = True
        args = cli.build_parser().parse_args(["infer", "--json"])
        assert cli.apply_overrides(config, args).verbose is False


class TestMain:

    def test_table_output(self, config, result, capsys):
        with patch("schema_sampler.cli.get_config", return_value=config), \
                patch("schema_sampler.cli.run_infer", AsyncMock(return_value=result)):
            assert cli.main(["infer"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0].split() == ["FIELD", "TYPES"]
        assert out[1].split() == ["age", "integer"]
        assert out[2].split() == ["name", "missing,", "string"]

    def test_json_output(self, config, result, capsys):
        with patch("schema_sampler.cli.get_config", return_value=config), \
                patch("schema_sampler.cli.run_infer", AsyncMock(return_value=result)):
            assert cli.main(["infer", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["schema"] == [
            {"field": "age", "types": ["integer"]},
            {"field": "name", "types": ["missing", "string"]},
        ]
        assert payload["distinct_shapes"] == 2

    def test_data_source_error_exit_code(self, config, capsys):
        with patch("schema_sampler.cli.get_config", return_value=config), \
                patch("schema_sampler.cli.run_infer", AsyncMock(side_effect=DataSourceError("down"))):
            assert cli.main(["infer"]) == 1
        assert "down" in capsys.readouterr().err

    def test_cancelled_exit_code(self, config):
        with patch("schema_sampler.cli.get_config", return_value=config), \
                patch("schema_sampler.cli.run_infer", AsyncMock(side_effect=InferenceCancelled())):
            assert cli.main(["infer"]) == 130

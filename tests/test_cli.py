import uuid

import pytest
import typer
from typer.testing import CliRunner

from gameasure import cli as cli_module
from gameasure.cli import build_custom, build_identifier, cli_app
from gameasure.constants import EXIT_CODE_DELIVERY_FAILED, EXIT_CODE_INVALID_HIT
from gameasure.engine import GAMeasurement
from gameasure.models import ClientIdentifier, Custom, UserIdentifier

CLIENT_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
BASE_ARGS = [
    "--tracking-id",
    "UA-1234-1",
    "--client-id",
    CLIENT_ID,
    "--app-name",
    "Demo",
    "--endpoint",
    "https://collect.test/batch",
    "--flush-delay",
    "0.05",
]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_engine(monkeypatch, recorder, transport_factory):
    def factory(defaults, log=None, config=None):
        return GAMeasurement(
            defaults, log=log, config=config, transport=transport_factory(recorder)
        )

    monkeypatch.setattr(cli_module, "GAMeasurement", factory)
    return recorder


class TestDryRun:
    def test_event_prints_encoded_hit(self, runner):
        result = runner.invoke(
            cli_app,
            BASE_ARGS + ["--dry-run", "event", "video", "play", "--label", "intro clip"],
        )

        assert result.exit_code == 0, result.output
        assert "t=event&ec=video&ea=play&el=intro%20clip" in result.output
        assert f"cid={CLIENT_ID.upper()}" in result.output
        assert "tid=UA-1234-1" in result.output

    def test_screen_with_custom(self, runner):
        result = runner.invoke(
            cli_app,
            BASE_ARGS
            + [
                "--dry-run",
                "screen",
                "Home",
                "--custom-dimension",
                "1=gold",
                "--custom-metric",
                "2=5",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "t=screenview&cd=Home&cd1=gold&cm2=5" in result.output

    def test_user_id(self, runner):
        args = ["--tracking-id", "UA-1", "--user-id", "user-9", "--dry-run"]
        result = runner.invoke(cli_app, args + ["exception", "boom"])

        assert result.exit_code == 0, result.output
        assert "uid=user-9" in result.output
        assert "t=exception&exd=boom" in result.output


class TestDelivery:
    def test_event_is_posted(self, runner, patched_engine):
        result = runner.invoke(cli_app, BASE_ARGS + ["event", "video", "play"])

        assert result.exit_code == 0, result.output
        assert len(patched_engine.requests) == 1
        assert patched_engine.bodies[0].endswith("t=event&ec=video&ea=play\n")
        assert "Sent data" in result.output

    def test_immediate_uses_single_hit_path(self, runner, patched_engine):
        result = runner.invoke(cli_app, BASE_ARGS + ["--immediate", "screen", "Home"])

        assert result.exit_code == 0, result.output
        assert str(patched_engine.requests[0].url).endswith("/collect")

    def test_server_rejection_exit_code(self, runner, patched_engine):
        patched_engine.status_code = 500

        result = runner.invoke(cli_app, BASE_ARGS + ["screen", "Home"])

        assert result.exit_code == EXIT_CODE_DELIVERY_FAILED
        assert "Error: 500" in result.output

    def test_unencodable_hit_exit_code(self, runner, patched_engine):
        result = runner.invoke(cli_app, BASE_ARGS + ["screen", "bad \udcff"])

        assert result.exit_code == EXIT_CODE_INVALID_HIT
        assert patched_engine.requests == []


class TestOptions:
    def test_tracking_id_is_required(self, runner):
        result = runner.invoke(cli_app, ["screen", "Home"])

        assert result.exit_code != 0

    def test_invalid_client_id(self, runner):
        result = runner.invoke(
            cli_app, ["--tracking-id", "UA-1", "--client-id", "nope", "--dry-run", "screen", "x"]
        )

        assert result.exit_code == 2

    def test_invalid_flush_delay_is_a_usage_error(self, runner):
        result = runner.invoke(
            cli_app, ["--tracking-id", "UA-1", "--flush-delay", "-1", "--dry-run", "screen", "x"]
        )

        assert result.exit_code == 2


class TestBuilders:
    def test_build_custom(self):
        assert build_custom("3=plan", "4=12") == Custom(
            dimension_index=3, dimension_value="plan", metric_index=4, metric_value=12
        )

    def test_build_custom_absent(self):
        assert build_custom(None, None) is None

    @pytest.mark.parametrize(
        "dimension, metric",
        [("1=a", None), (None, "1=2"), ("a=1", "1=2"), ("1=a", "1=x"), ("1a", "1=2")],
    )
    def test_build_custom_invalid(self, dimension, metric):
        with pytest.raises(typer.BadParameter):
            build_custom(dimension, metric)

    def test_build_identifier(self):
        assert build_identifier(CLIENT_ID, None) == ClientIdentifier(
            anonymous_id=uuid.UUID(CLIENT_ID)
        )
        assert build_identifier(None, "u1") == UserIdentifier(user_id="u1")
        assert isinstance(build_identifier(None, None), ClientIdentifier)

    def test_build_identifier_rejects_both(self):
        with pytest.raises(typer.BadParameter):
            build_identifier(CLIENT_ID, "u1")


def test_registered_commands():
    group = typer.main.get_command(cli_app)

    assert set(group.commands) == {"event", "exception", "screen"}
    assert "--dry-run" in [
        opt for param in group.params for opt in param.opts
    ]

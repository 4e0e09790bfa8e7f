# -*- coding: utf-8 -*-
from dataclasses import dataclass
import logging
from typing import List, Optional
import uuid

from typing_extensions import Annotated
import typer

from gameasure.config import EngineConfig, get_engine_config
from gameasure.console import main_console as console
from gameasure.constants import (
    EXIT_CODE_DELIVERY_FAILED,
    EXIT_CODE_INVALID_HIT,
    EXIT_CODE_OK,
)
from gameasure.encoding import encode_hit
from gameasure.engine import GAMeasurement
from gameasure.error_handlers import handle_cmd_exception
from gameasure.models import (
    AppInfo,
    ClientIdentifier,
    Collect,
    Custom,
    Event,
    ExceptionHit,
    Identifier,
    QueryRepresentable,
    Screen,
    UserIdentifier,
)

LOG = logging.getLogger(__name__)

CLI_MAIN_INTRODUCTION = (
    "Send analytics hits to a Measurement Protocol collection endpoint.\n\n"
    "Hits tracked in one invocation are batched and posted together."
)
CLI_DEBUG_HELP = "Enable debug logging."
CLI_TRACKING_ID_HELP = "Property tracking ID the hits are recorded against, e.g. UA-XXXX-Y."
CLI_CLIENT_ID_HELP = "Anonymous client UUID. A random one is used when neither this nor --user-id is given."
CLI_USER_ID_HELP = "Known user identifier, used instead of an anonymous client ID."
CLI_DRY_RUN_HELP = "Print the encoded hit instead of sending it."
CLI_IMMEDIATE_HELP = "Send the hit on its own, right away, instead of batching it."
CLI_CUSTOM_DIMENSION_HELP = "Custom dimension as INDEX=VALUE. Requires --custom-metric."
CLI_CUSTOM_METRIC_HELP = "Custom metric as INDEX=VALUE. Requires --custom-dimension."


@dataclass
class CLIContext:
    defaults: Collect
    config: EngineConfig
    dry_run: bool = False
    immediate: bool = False


def configure_logger(ctx: typer.Context, param: typer.CallbackParam, debug: bool) -> bool:
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)
    return debug


def _parse_index_pair(raw: str, option: str) -> tuple:
    index, sep, value = raw.partition("=")
    if not sep or not index.strip().isdigit():
        raise typer.BadParameter(f"expected INDEX=VALUE, got {raw!r}", param_hint=option)
    return int(index), value


def build_custom(
    dimension: Optional[str], metric: Optional[str]
) -> Optional[Custom]:
    """
    Turn the --custom-dimension and --custom-metric options into a Custom.
    """
    if dimension is None and metric is None:
        return None

    if dimension is None or metric is None:
        raise typer.BadParameter(
            "--custom-dimension and --custom-metric must be given together"
        )

    dimension_index, dimension_value = _parse_index_pair(dimension, "--custom-dimension")
    metric_index, metric_raw = _parse_index_pair(metric, "--custom-metric")

    try:
        metric_value = int(metric_raw)
    except ValueError:
        raise typer.BadParameter(
            f"metric value must be an integer, got {metric_raw!r}",
            param_hint="--custom-metric",
        )

    return Custom(
        dimension_index=dimension_index,
        dimension_value=dimension_value,
        metric_index=metric_index,
        metric_value=metric_value,
    )


def build_identifier(client_id: Optional[str], user_id: Optional[str]) -> Identifier:
    if client_id and user_id:
        raise typer.BadParameter("use either --client-id or --user-id, not both")

    if user_id:
        return UserIdentifier(user_id=user_id)

    if client_id:
        try:
            return ClientIdentifier(anonymous_id=uuid.UUID(client_id))
        except ValueError:
            raise typer.BadParameter(
                f"{client_id!r} is not a UUID", param_hint="--client-id"
            )

    return ClientIdentifier()


cli_app = typer.Typer(
    rich_markup_mode="rich",
    name="gameasure",
    help=CLI_MAIN_INTRODUCTION,
    no_args_is_help=True,
)


@cli_app.callback()
@handle_cmd_exception
def cli(
    ctx: typer.Context,
    tracking_id: Annotated[
        str,
        typer.Option(
            "--tracking-id", envvar="GAMEASURE_TRACKING_ID", help=CLI_TRACKING_ID_HELP
        ),
    ],
    client_id: Annotated[
        Optional[str], typer.Option("--client-id", help=CLI_CLIENT_ID_HELP)
    ] = None,
    user_id: Annotated[
        Optional[str], typer.Option("--user-id", help=CLI_USER_ID_HELP)
    ] = None,
    app_name: Annotated[
        Optional[str], typer.Option("--app-name", help="Application name.")
    ] = None,
    app_version: Annotated[
        Optional[str], typer.Option("--app-version", help="Application version.")
    ] = None,
    endpoint: Annotated[
        Optional[str], typer.Option("--endpoint", help="Batch collection URL.")
    ] = None,
    flush_delay: Annotated[
        Optional[float],
        typer.Option("--flush-delay", help="Seconds hits are collected before a batch is sent."),
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", help="Request timeout in seconds.")
    ] = None,
    proxy_host: Annotated[
        Optional[str], typer.Option("--proxy-host", help="Proxy host.")
    ] = None,
    proxy_port: Annotated[
        Optional[str], typer.Option("--proxy-port", help="Proxy port.")
    ] = None,
    proxy_protocol: Annotated[
        Optional[str], typer.Option("--proxy-protocol", help="Proxy protocol (http or https).")
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help=CLI_DRY_RUN_HELP)
    ] = False,
    immediate: Annotated[
        bool, typer.Option("--immediate", help=CLI_IMMEDIATE_HELP)
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help=CLI_DEBUG_HELP, callback=configure_logger, is_eager=True),
    ] = False,
) -> None:
    app_info = AppInfo(name=app_name, version=app_version) if app_name else None

    defaults = Collect(
        user=build_identifier(client_id, user_id),
        tracking_id=tracking_id,
        app_info=app_info,
    )
    config = get_engine_config(
        endpoint=endpoint,
        flush_delay=flush_delay,
        timeout=timeout,
        proxy_host=proxy_host,
        proxy_port=proxy_port,
        proxy_protocol=proxy_protocol,
    )
    LOG.debug("Engine configuration: %s", config.as_dict())

    ctx.obj = CLIContext(
        defaults=defaults, config=config, dry_run=dry_run, immediate=immediate
    )


def deliver(ctx: typer.Context, request: QueryRepresentable, custom: Optional[Custom]) -> None:
    """
    Send one hit with the options collected by the main callback and exit
    with the delivery outcome.
    """
    obj: CLIContext = ctx.obj

    if obj.dry_run:
        console.print(encode_hit(obj.defaults, request, custom), style="hit", markup=False)
        raise typer.Exit(EXIT_CODE_OK)

    messages: List[str] = []
    engine = GAMeasurement(obj.defaults, log=messages.append, config=obj.config)

    engine.start()
    try:
        if obj.immediate:
            future = engine.send(request, custom)
            if future is not None:
                future.result(obj.config.timeout + 1)
        else:
            engine.track(request, custom)
    finally:
        engine.stop(timeout=obj.config.timeout + obj.config.flush_delay + 1)

    for message in messages:
        style = "success" if message.startswith("Sent data") else "error"
        console.print(message, style=style, markup=False)

    metrics = engine.get_metrics()
    if metrics["hits_dropped"]:
        console.print("The hit could not be encoded and was dropped.", style="error")
        raise typer.Exit(EXIT_CODE_INVALID_HIT)
    if metrics["failures"]:
        raise typer.Exit(EXIT_CODE_DELIVERY_FAILED)


@cli_app.command(name="event", help="Track an event.")
@handle_cmd_exception
def event(
    ctx: typer.Context,
    category: Annotated[str, typer.Argument(help="Event category.")],
    action: Annotated[str, typer.Argument(help="Event action.")],
    label: Annotated[Optional[str], typer.Option("--label", help="Event label.")] = None,
    value: Annotated[Optional[int], typer.Option("--value", help="Event value.")] = None,
    custom_dimension: Annotated[
        Optional[str], typer.Option("--custom-dimension", help=CLI_CUSTOM_DIMENSION_HELP)
    ] = None,
    custom_metric: Annotated[
        Optional[str], typer.Option("--custom-metric", help=CLI_CUSTOM_METRIC_HELP)
    ] = None,
) -> None:
    request = Event(category=category, action=action, label=label, value=value)
    deliver(ctx, request, build_custom(custom_dimension, custom_metric))


@cli_app.command(name="exception", help="Track an exception.")
@handle_cmd_exception
def exception(
    ctx: typer.Context,
    description: Annotated[str, typer.Argument(help="Exception description.")],
    custom_dimension: Annotated[
        Optional[str], typer.Option("--custom-dimension", help=CLI_CUSTOM_DIMENSION_HELP)
    ] = None,
    custom_metric: Annotated[
        Optional[str], typer.Option("--custom-metric", help=CLI_CUSTOM_METRIC_HELP)
    ] = None,
) -> None:
    deliver(
        ctx,
        ExceptionHit(description=description),
        build_custom(custom_dimension, custom_metric),
    )


@cli_app.command(name="screen", help="Track a screen view.")
@handle_cmd_exception
def screen(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Screen name.")],
    custom_dimension: Annotated[
        Optional[str], typer.Option("--custom-dimension", help=CLI_CUSTOM_DIMENSION_HELP)
    ] = None,
    custom_metric: Annotated[
        Optional[str], typer.Option("--custom-metric", help=CLI_CUSTOM_METRIC_HELP)
    ] = None,
) -> None:
    deliver(ctx, Screen(name=name), build_custom(custom_dimension, custom_metric))

"""
Dashboard en vivo contra la API:

    python -m charging_app.client --api-url http://localhost:8000/api --output dashboard.html

Reescribe el HTML en cada tick y loguea los conteos hasta Ctrl+C.

Gestión de estaciones (solo con el modo admin activo):

    python -m charging_app.client add --name "Hub" --address "80 Feet Rd" --image-file hub.png
    python -m charging_app.client edit 3 --status Maintenance
    python -m charging_app.client delete 3
"""
import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from charging_app.client.api import StationApiClient, StationApiError
from charging_app.client.dashboard import ADMIN_REQUIRED_ERROR, VIEW_MODES, Dashboard
from charging_app.client.forms import FORM_FIELDS, ImageFileError, edit_station_form, image_data_url, new_station_form
from charging_app.client.preferences import Preferences
from charging_app.client.render import render_dashboard
from charging_app.core.config import settings
from charging_app.core.logging_setup import configure_logging

logger = logging.getLogger(__name__)

MUTATION_COMMANDS = ("add", "edit", "delete")


def _station_options() -> argparse.ArgumentParser:
    # dest con prefijo para no pisar los filtros del parser principal
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--name", dest="field_station_name")
    parent.add_argument("--address", dest="field_location_address")
    parent.add_argument("--pin-code", dest="field_pin_code")
    parent.add_argument("--connector-type", dest="field_connector_type")
    parent.add_argument("--status", dest="field_status")
    parent.add_argument("--location-link", dest="field_location_link")
    image = parent.add_mutually_exclusive_group()
    image.add_argument("--image-url", dest="field_image_url", help='URL of the image, "" removes it')
    image.add_argument("--image-file", dest="image_file", help="local image sent inline as base64 (max 5MB)")
    return parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="charging_app.client", description="Live charging station dashboard")
    parser.add_argument("--api-url", default=settings.API_BASE_URL)
    parser.add_argument("--output", default="dashboard.html", help="HTML file rewritten on every tick")
    parser.add_argument("--view", choices=VIEW_MODES, default="graph")
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--search", default="")
    parser.add_argument("--pin-code", default="")
    parser.add_argument("--connector-type", default="")
    parser.add_argument("--status", default="")
    parser.add_argument("--toggle-admin", action="store_true", help="flip and persist admin mode, then exit")
    parser.add_argument("--once", action="store_true", help="render a single snapshot and exit")

    commands = parser.add_subparsers(dest="command")
    fields = _station_options()
    commands.add_parser("add", parents=[fields], help="create a station")
    edit = commands.add_parser("edit", parents=[fields], help="replace a station, starting from its current values")
    edit.add_argument("station_id", type=int)
    delete = commands.add_parser("delete", help="delete a station")
    delete.add_argument("station_id", type=int)
    return parser


def _form_changes(args: argparse.Namespace) -> dict:
    return {field: getattr(args, f"field_{field}", None) for field in FORM_FIELDS}


def _writer(output: Path):
    def write(dashboard: Dashboard) -> None:
        output.write_text(render_dashboard(dashboard.view()), encoding="utf-8")
        stats = dashboard.stats
        logger.info(
            "total=%s operational=%s maintenance=%s",
            stats.total, stats.operational, stats.maintenance,
        )
    return write


# ------------------ ALTA / EDICIÓN / BAJA ------------------ #
async def run_mutation(args: argparse.Namespace, dashboard: Dashboard) -> int:
    if not dashboard.is_admin:
        logger.error("%s", ADMIN_REQUIRED_ERROR)
        return 1

    if args.command == "delete":
        ok = await dashboard.delete_station(args.station_id)
    else:
        changes = _form_changes(args)
        if args.image_file:
            try:
                changes["image_url"] = image_data_url(args.image_file)
            except ImageFileError as exc:
                logger.error("%s", exc)
                return 1
            except OSError as exc:
                logger.error("Could not read image %s: %s", args.image_file, exc)
                return 1

        if args.command == "add":
            ok = await dashboard.create_station(new_station_form(**changes))
        else:
            try:
                current = await dashboard.api.get_station_by_id(args.station_id)
            except StationApiError as exc:
                logger.error("%s", exc.message)
                return 1
            ok = await dashboard.update_station(args.station_id, edit_station_form(current, **changes))

    if not ok:
        logger.error("%s", dashboard.error)
        return 1
    logger.info("%s done, %s stations on the server", args.command, len(dashboard.stations))
    return 0


# ------------------ DASHBOARD ------------------ #
async def run(
    args: argparse.Namespace,
    api: Optional[StationApiClient] = None,
    preferences: Optional[Preferences] = None,
) -> int:
    if api is None:
        async with StationApiClient(args.api_url) as client:
            return await run(args, client, preferences)

    dashboard = Dashboard(api, preferences or Preferences())
    if args.command in MUTATION_COMMANDS:
        return await run_mutation(args, dashboard)

    dashboard.set_view_mode(args.view)
    for name in ("search", "pin_code", "connector_type", "status"):
        value = getattr(args, name)
        if value:
            dashboard.set_filter(name, value)

    await dashboard.load()
    dashboard.set_page(args.page)
    if dashboard.error:
        logger.error("%s", dashboard.error)

    write = _writer(Path(args.output))
    if args.once:
        dashboard.tick()
        write(dashboard)
        return 1 if dashboard.error else 0

    dashboard.add_listener(write)
    async with dashboard:
        # Sin push del servidor: se vive de los ticks locales
        await asyncio.Event().wait()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    if args.toggle_admin:
        prefs = Preferences()
        enabled = not prefs.get_admin_mode()
        prefs.set_admin_mode(enabled)
        logger.info("Admin mode %s", "enabled" if enabled else "disabled")
        return 0

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Command line interface for docshost administration.

Usage examples:
    docshost database blacklist add some-crate
    docshost database delete version some-crate 1.2.3
    docshost database add-release metadata.json --doc-target x86_64-unknown-linux-gnu --docs-dir target/doc
    docshost queue set-priority 'rustc-ap-%' -- -5
    docshost limits set big-crate --timeout 1800
    docshost serve --port 3000

Every command exits 0 on success and 1 (with the error on stderr) when a
service rejects the operation.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Iterator, List, Optional

from docshost import config
from docshost.services import (
    blacklist_service,
    consistency_service,
    delete_service,
    limits_service,
    queue_service,
    release_activity_service,
    release_service,
)
from docshost.services.blacklist_service import BlacklistError
from docshost.services.crate_details_service import CrateNotFoundError
from docshost.services.delete_service import CrateDeletionError
from docshost.services.release_service import DocCoverageCounts, ReleaseImportError
from docshost.storage import Blob, StorageError, detect_mime
from docshost.utils.cargo_metadata import CargoMetadata, CargoMetadataError
from docshost.utils.logging import get_logger

LOG = get_logger("cli")

_HANDLED_ERRORS = (
    BlacklistError,
    CargoMetadataError,
    CrateDeletionError,
    CrateNotFoundError,
    ReleaseImportError,
    StorageError,
)


def _walk_files(root: str, prefix: str) -> Iterator[Blob]:
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in sorted(filenames):
            full = os.path.join(dirpath, filename)
            rel = os.path.relpath(full, root).replace(os.sep, "/")
            with open(full, "rb") as fh:
                content = fh.read()
            yield Blob(path=f"{prefix}{rel}", mime=detect_mime(rel), content=content)


# --- database ---------------------------------------------------------------

def _blacklist(args: argparse.Namespace) -> int:
    if args.blacklist_command == "list":
        for name in blacklist_service.list_crates():
            print(name)
    elif args.blacklist_command == "add":
        blacklist_service.add_crate(args.crate_name)
    else:
        blacklist_service.remove_crate(args.crate_name)
    return 0


def _delete(args: argparse.Namespace) -> int:
    if args.delete_command == "crate":
        delete_service.delete_crate(args.name)
    else:
        delete_service.delete_version(args.name, args.version)
    return 0


def _update_release_activity(_args: argparse.Namespace) -> int:
    activity = release_activity_service.update_release_activity()
    print(json.dumps(activity))
    return 0


def _dump_releases(_args: argparse.Namespace) -> int:
    print(json.dumps(consistency_service.load(), indent=2))
    return 0


def _add_release(args: argparse.Namespace) -> int:
    with open(args.metadata_json, "r", encoding="utf-8") as fh:
        metadata = CargoMetadata.parse(fh.read())
    package = metadata.root()
    files: List[Blob] = []
    if args.docs_dir:
        files.extend(_walk_files(args.docs_dir, f"rustdoc/{package.name}/{package.version}/"))
    if args.source_dir:
        files.extend(_walk_files(args.source_dir, f"sources/{package.name}/{package.version}/"))
    coverage = None
    if args.total_items is not None or args.documented_items is not None:
        coverage = DocCoverageCounts(total_items=args.total_items, documented_items=args.documented_items)
    release_id = release_service.add_package(
        package,
        doc_targets=args.doc_target or [],
        default_target=args.default_target,
        build_status=not args.build_failed,
        rustc_version=args.rustc_version,
        docsrs_version=args.docsrs_version or f"{config.APP_NAME} {config.APP_VERSION}",
        doc_coverage=coverage,
        files=files,
    )
    print(f"{package.name} {package.version} stored as release {release_id} ({len(files)} files)")
    return 0


def _yank(args: argparse.Namespace) -> int:
    release_service.yank(args.name, args.version, yanked=not args.unyank)
    return 0


# --- queue ------------------------------------------------------------------

def _queue(args: argparse.Namespace) -> int:
    if args.queue_command == "get-priority":
        print(queue_service.get_crate_priority(args.crate_name))
    elif args.queue_command == "set-priority":
        queue_service.set_crate_priority(args.pattern, args.priority)
    else:
        removed = queue_service.remove_crate_priority(args.pattern)
        if removed is None:
            print(f"no priority set for pattern {args.pattern}")
        else:
            print(f"removed priority {removed} for pattern {args.pattern}")
    return 0


# --- limits -----------------------------------------------------------------

def _limits(args: argparse.Namespace) -> int:
    if args.limits_command == "show":
        limits = limits_service.limits_for_crate(args.crate_name)
    elif args.limits_command == "set":
        limits = limits_service.set_override(
            args.crate_name,
            max_memory_bytes=args.memory,
            timeout_seconds=args.timeout,
            max_targets=args.targets,
        )
    else:
        if not limits_service.remove_override(args.crate_name):
            print(f"no override stored for {args.crate_name}")
        limits = limits_service.limits_for_crate(args.crate_name)
    print(json.dumps(limits.as_dict()))
    return 0


# --- serve ------------------------------------------------------------------

def _serve(args: argparse.Namespace) -> int:  # pragma: no cover - runs a server
    from docshost.startup import create_app

    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docshost", description="Documentation host administration.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.APP_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    database = commands.add_parser("database", help="Database operations")
    db_commands = database.add_subparsers(dest="database_command", required=True)

    blacklist = db_commands.add_parser("blacklist", help="Manage the crate blacklist")
    bl_commands = blacklist.add_subparsers(dest="blacklist_command", required=True)
    bl_commands.add_parser("list", help="List blacklisted crates")
    for action in ("add", "remove"):
        sub = bl_commands.add_parser(action, help=f"{action.capitalize()} a crate")
        sub.add_argument("crate_name")
    blacklist.set_defaults(handler=_blacklist)

    delete = db_commands.add_parser("delete", help="Remove a crate or a single version")
    del_commands = delete.add_subparsers(dest="delete_command", required=True)
    del_crate = del_commands.add_parser("crate", help="Delete a whole crate")
    del_crate.add_argument("name")
    del_version = del_commands.add_parser("version", help="Delete one version")
    del_version.add_argument("name")
    del_version.add_argument("version")
    delete.set_defaults(handler=_delete)

    activity = db_commands.add_parser("update-release-activity", help="Recompute the release activity series")
    activity.set_defaults(handler=_update_release_activity)

    dump = db_commands.add_parser("dump-releases", help="Print every crate with its versions as JSON")
    dump.set_defaults(handler=_dump_releases)

    add_release = db_commands.add_parser("add-release", help="Import a release from cargo metadata output")
    add_release.add_argument("metadata_json", help="File holding `cargo metadata --format-version 1` output")
    add_release.add_argument("--doc-target", action="append", help="Documented target (repeatable)")
    add_release.add_argument("--default-target")
    add_release.add_argument("--docs-dir", help="Directory with generated documentation")
    add_release.add_argument("--source-dir", help="Directory with the crate sources")
    add_release.add_argument("--build-failed", action="store_true")
    add_release.add_argument("--rustc-version", default="")
    add_release.add_argument("--docsrs-version", default="")
    add_release.add_argument("--total-items", type=int)
    add_release.add_argument("--documented-items", type=int)
    add_release.set_defaults(handler=_add_release)

    yank = db_commands.add_parser("yank", help="Mark a release as yanked")
    yank.add_argument("name")
    yank.add_argument("version")
    yank.add_argument("--unyank", action="store_true", help="Clear the yanked flag instead")
    yank.set_defaults(handler=_yank)

    queue = commands.add_parser("queue", help="Build queue priorities")
    q_commands = queue.add_subparsers(dest="queue_command", required=True)
    get_priority = q_commands.add_parser("get-priority", help="Priority applied to a crate name")
    get_priority.add_argument("crate_name")
    set_priority = q_commands.add_parser("set-priority", help="Set the priority of a LIKE pattern")
    set_priority.add_argument("pattern")
    set_priority.add_argument("priority", type=int)
    remove_priority = q_commands.add_parser("remove-priority", help="Remove a pattern")
    remove_priority.add_argument("pattern")
    queue.set_defaults(handler=_queue)

    limits = commands.add_parser("limits", help="Sandbox limits per crate")
    l_commands = limits.add_subparsers(dest="limits_command", required=True)
    show = l_commands.add_parser("show", help="Effective limits of a crate")
    show.add_argument("crate_name")
    set_limits = l_commands.add_parser("set", help="Store an override")
    set_limits.add_argument("crate_name")
    set_limits.add_argument("--memory", type=int, help="Memory in bytes")
    set_limits.add_argument("--timeout", type=int, help="Timeout in seconds")
    set_limits.add_argument("--targets", type=int, help="Maximum number of targets")
    remove_limits = l_commands.add_parser("remove", help="Remove an override")
    remove_limits.add_argument("crate_name")
    limits.set_defaults(handler=_limits)

    serve = commands.add_parser("serve", help="Run the development web server")
    serve.add_argument("--host", default=config.server_host())
    serve.add_argument("--port", type=int, default=config.server_port())
    serve.add_argument("--debug", action="store_true", default=config.server_debug())
    serve.set_defaults(handler=_serve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except _HANDLED_ERRORS as exc:
        LOG.debug("command failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())


__all__ = ["build_parser", "main"]

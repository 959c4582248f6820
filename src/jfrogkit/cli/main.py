# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""jfrogkit CLI."""

from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from typing import Any

from ..config import HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from ..errors import JfrogKitError, indent_json
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import BuildInfo, GraphNode, ScanResult
from ..runtime import JfrogKit

CLI_TEXT_TRUNCATION_BYTES = 4096
_SEVERITY_ORDER = ("Critical", "High", "Medium", "Low", "Unknown")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jfrogkit", description="Artifact repository and security scanner client")
    parser.add_argument("--log-level", default=None, help="Logging level (default: JFROGKIT_LOG_LEVEL or WARNING)")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed servers)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Submit a dependency graph and wait for its results")
    scan.add_argument("graph", help="Path to a JSON dependency graph ('-' for stdin)")
    scope = scan.add_mutually_exclusive_group()
    scope.add_argument("--project", help="Project key whose watches apply")
    scope.add_argument("--repo-path", help="Repository path the artifact will be deployed to")
    scope.add_argument("--watch", action="append", default=[], help="Watch name (repeatable)")
    scan.add_argument("--vulnerabilities", action="store_true", help="Include all vulnerabilities in the results")
    scan.add_argument("--licenses", action="store_true", help="Include all licenses in the results")
    scan.add_argument("--max-wait", type=float, default=None, help="Maximum seconds to wait for results")
    scan.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly summary")

    publish = subparsers.add_parser("build-publish", help="Publish a build-info document")
    publish.add_argument("build", help="Path to a JSON build-info document ('-' for stdin)")
    publish.add_argument("--project", default="", help="Project key")
    publish.add_argument("--dry-run", action="store_true", help="Print the payload instead of sending it")

    get = subparsers.add_parser("build-get", help="Fetch a published build-info document")
    get.add_argument("name")
    get.add_argument("number")
    get.add_argument("--project", default="", help="Project key")
    return parser


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    suffix_bytes = suffix.encode("utf-8")
    keep = max_bytes - len(suffix_bytes)
    if keep <= 0:
        return suffix_bytes[:max_bytes].decode("utf-8", errors="ignore")
    prefix = raw[:keep].decode("utf-8", errors="ignore")
    return prefix + suffix


def _truncate_for_cli(value: Any, *, max_bytes: int) -> Any:
    """Truncate large strings in JSON output."""
    if isinstance(value, str):
        return _truncate_text_bytes(value, max_bytes)
    if isinstance(value, dict):
        return {k: _truncate_for_cli(v, max_bytes=max_bytes) for k, v in value.items()}
    if isinstance(value, list):
        return [_truncate_for_cli(v, max_bytes=max_bytes) for v in value]
    return value


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(_truncate_for_cli(payload, max_bytes=CLI_TEXT_TRUNCATION_BYTES), sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _severity_counts(items: list[Any]) -> str:
    counts = Counter(item.severity or "Unknown" for item in items)
    ordered = [s for s in _SEVERITY_ORDER if s in counts] + sorted(s for s in counts if s not in _SEVERITY_ORDER)
    return ", ".join(f"{severity}={counts[severity]}" for severity in ordered)


def _pretty_print(result: ScanResult) -> None:
    print(f"[jfrogkit] Scan {result.scan_id or '-'}: {result.status or 'done'}")
    if result.component_id:
        print(f"Component: {result.component_id}" + (f" ({result.package_type})" if result.package_type else ""))
    print(f"Violations: {len(result.violations)}" + (f" ({_severity_counts(result.violations)})" if result.violations else ""))
    for violation in result.violations:
        cves = ", ".join(cve.cve for cve in violation.cves if cve.cve)
        label = cves or violation.issue_id or violation.license_key or "-"
        watch = f" [watch: {violation.watch_name}]" if violation.watch_name else ""
        fail = " FAIL-BUILD" if violation.fail_build else ""
        print(f"- {label} {violation.severity or 'Unknown'}: {violation.summary}{watch}{fail}")
    if result.vulnerabilities:
        print(f"Vulnerabilities: {len(result.vulnerabilities)} ({_severity_counts(result.vulnerabilities)})")
    if result.licenses:
        print(f"Licenses: {', '.join(sorted({lic.key or lic.name for lic in result.licenses}))}")


def _load_json(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def _run_scan(kit: JfrogKit, args: argparse.Namespace) -> int:
    graph = GraphNode.from_mapping(_load_json(args.graph))
    result = kit.scan_graph(
        graph,
        project_key=args.project,
        repo_path=args.repo_path,
        watches=args.watch,
        include_vulnerabilities=args.vulnerabilities,
        include_licenses=args.licenses,
        max_wait=args.max_wait,
    )
    if args.json:
        _print_json(result)
    else:
        _pretty_print(result)
    return 0


def _run_build_publish(kit: JfrogKit, args: argparse.Namespace) -> int:
    build = BuildInfo.from_mapping(_load_json(args.build))
    summary = kit.publish_build_info(build, args.project)
    if args.dry_run:
        print("[jfrogkit] Dry run: build info was not published", file=sys.stderr)
        sys.stdout.write(indent_json(json.dumps(build.to_dict())) + "\n")
        return 0
    _print_json({"succeeded": summary.succeeded, "sha256": summary.sha256, "dry_run": args.dry_run})
    return 0


def _run_build_get(kit: JfrogKit, args: argparse.Namespace) -> int:
    published, found = kit.get_build_info(args.name, args.number, args.project)
    if not found or published is None:
        print(f"Build {args.name}/{args.number} not found", file=sys.stderr)
        return 1
    _print_json({"uri": published.uri, "buildInfo": published.build_info.to_dict() if published.build_info else None})
    return 0


_COMMANDS = {
    "scan": _run_scan,
    "build-publish": _run_build_publish,
    "build-get": _run_build_get,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    scan_settings: ScanSettings = load_scan_settings()

    http_client = create_default_http_client(settings)

    try:
        with JfrogKit(
            http_client=http_client,
            http_settings=settings,
            scan_settings=scan_settings,
            dry_run=getattr(args, "dry_run", False),
        ) as kit:
            return _COMMANDS[args.command](kit, args)
    except (JfrogKitError, OSError, ValueError) as exc:
        print(f"[jfrogkit] {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

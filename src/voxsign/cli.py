"""
Command-line interface for voxsign.

Usage:
    voxsign generate [--preset NAME] [--request FILE] [--set NAME=VALUE ...]
                     [--text TEXT] [--icon IMAGE] -o OUT.vox [--json SUMMARY]
    voxsign presets
    voxsign inspect FILE.vox

Examples:
    # Framed wall sign from the bundled defaults
    voxsign generate --preset standard --text "HI" -o hi.vox

    # Hanging sign with an icon, icon after the text
    voxsign generate --preset hanging --icon lantern.png \
        --set hangingIconPosition=right -o shop.vox

    # Request file (YAML or JSON) with an override
    voxsign generate --request sign.yaml --set frameWidth=3 -o sign.vox
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from voxsign import __version__
from voxsign.icon import load_icon_for
from voxsign.io.vox import read_vox
from voxsign.logging_config import configure_logging
from voxsign.presets import get_preset, load_presets
from voxsign.sign import generate_sign
from voxsign.validation import FIELD_ALIASES, ValidationError, normalize_keys, validate_request

# Request fields whose --set values are never converted to numbers or booleans.
STRING_FIELDS = ("text",)


def parse_param(param_str: str, string_fields: Sequence[str] = STRING_FIELDS) -> tuple:
    """Parse a parameter string like 'name=value' into (name, typed_value).

    Values of ``string_fields`` are kept as strings, so ``text=123`` stays text.
    """
    if '=' not in param_str:
        raise ValueError(f"Invalid parameter format: {param_str} (expected name=value)")

    name, value_str = param_str.split('=', 1)
    name = name.strip()
    value_str = value_str.strip()

    if FIELD_ALIASES.get(name, name) not in string_fields:
        if value_str.lower() == 'true':
            return (name, True)
        elif value_str.lower() == 'false':
            return (name, False)

        try:
            return (name, int(value_str))
        except ValueError:
            pass

        try:
            return (name, float(value_str))
        except ValueError:
            pass

    # Strip quotes if present
    if (value_str.startswith('"') and value_str.endswith('"')) or \
       (value_str.startswith("'") and value_str.endswith("'")):
        value_str = value_str[1:-1]

    return (name, value_str)


def load_request_file(path: Path) -> Dict[str, Any]:
    """Load a YAML (or JSON) request mapping."""
    with open(path, 'r', encoding='utf-8') as fp:
        data = yaml.safe_load(fp)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Request file {path} must contain a mapping")
    return data


def build_request(args) -> Dict[str, Any]:
    """Merge preset, request file, ``--set`` values and ``--text``, in that order."""
    request: Dict[str, Any] = {}
    catalog = Path(args.catalog) if args.catalog else None
    if args.preset:
        request.update(normalize_keys(get_preset(args.preset, catalog)))
    if args.request:
        request.update(normalize_keys(load_request_file(Path(args.request))))
    overrides = dict(parse_param(p) for p in (args.set or []))
    request.update(normalize_keys(overrides))
    if args.text is not None:
        request['text'] = args.text
    return request


def _print_validation_error(exc: ValidationError) -> None:
    print("Error: invalid sign request", file=sys.stderr)
    for err in exc.errors:
        print(f"  {err}", file=sys.stderr)


def cmd_generate(args) -> int:
    """Generate a sign and write the .vox payload."""
    try:
        request = build_request(args)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        spec = validate_request(request)
    except ValidationError as exc:
        _print_validation_error(exc)
        return 2

    if args.icon:
        icon_path = Path(args.icon)
        if not icon_path.exists():
            print(f"Error: File not found: {icon_path}", file=sys.stderr)
            return 1
        try:
            spec = dataclasses.replace(spec, icon=load_icon_for(spec, icon_path))
        except (OSError, ValueError) as exc:
            print(f"Error: cannot use icon {icon_path}: {exc}", file=sys.stderr)
            return 1

    if not spec.has_text and not spec.has_icon:
        print("Error: a sign needs text or an icon", file=sys.stderr)
        return 2

    model = generate_sign(spec)

    output = Path(args.output)
    output.write_bytes(model.payload)
    print(f"{model.label}: {model.total_voxels} voxels written to {output}")

    if args.json:
        with open(args.json, 'w', encoding='utf-8') as fp:
            json.dump(model.to_dict(), fp, indent=2)
            fp.write("\n")
    return 0


def cmd_presets(args) -> int:
    """List the available presets."""
    catalog = Path(args.catalog) if args.catalog else None
    try:
        presets = load_presets(catalog)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for name in sorted(presets):
        description = presets[name]["description"]
        print(f"  {name}" + (f" - {description}" if description else ""))
    return 0


def cmd_inspect(args) -> int:
    """Print the contents summary of a .vox file."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1
    try:
        vox = read_vox(path)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    x, y, z = vox.size
    print(f"{path}: version {vox.version}, size {x}x{y}x{z}, {vox.num_voxels} voxels")
    usage = Counter(v.index for v in vox.voxels)
    for index, count in sorted(usage.items()):
        colour = vox.palette[index] if vox.palette else None
        print(f"  index {index}: {count} voxels" + (f", rgba {colour}" if colour else ""))
    return 0


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='voxsign',
        description='Generate voxel signs as MagicaVoxel .vox models',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--log-level', default='WARNING',
                        help='Logging level (DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument('--log-file', metavar='FILE', help='Also write log messages to FILE')
    parser.add_argument('--catalog', metavar='FILE',
                        help='Preset catalog YAML (overrides the preset search path)')

    subparsers = parser.add_subparsers(dest='action', required=True)

    gen_parser = subparsers.add_parser('generate', help='Generate a sign model')
    gen_parser.add_argument('--preset', help='Start from a named preset')
    gen_parser.add_argument('--request', metavar='FILE', help='Request file (YAML or JSON)')
    gen_parser.add_argument('-s', '--set', action='append', metavar='NAME=VALUE',
                            help='Request field value (can be repeated)')
    gen_parser.add_argument('--text', help='Sign text')
    gen_parser.add_argument('--icon', metavar='IMAGE', help='Icon image (alpha is the mask)')
    gen_parser.add_argument('-o', '--output', required=True, metavar='FILE',
                            help='Output .vox file')
    gen_parser.add_argument('--json', metavar='FILE', help='Write a JSON summary to FILE')

    subparsers.add_parser('presets', help='List available presets')

    inspect_parser = subparsers.add_parser('inspect', help='Summarize a .vox file')
    inspect_parser.add_argument('file', help='.vox file')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    if args.action == 'generate':
        return cmd_generate(args)
    elif args.action == 'presets':
        return cmd_presets(args)
    elif args.action == 'inspect':
        return cmd_inspect(args)
    parser.print_help()
    return 1


__all__ = ["build_request", "main", "parse_param"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

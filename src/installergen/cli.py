"""Command line interface for the installer generator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .config import GeneratorSettings, InstallerParameters
from .errors import (
    DuplicatePackageError,
    InstallerGeneratorError,
    ParameterValidationError,
)
from .io.adapters.local import LocalAssetIndex, LocalReloadLock
from .materializer import PackageMaterializer
from .naming import derive_namespace
from .template import MarkerSubstitutor
from .validation import check_package_absent, ensure_generatable, validate_parameters

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def _parse_key_value_pairs(pairs: Iterable[str]) -> InstallerParameters:
    values: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(
                f"invalid key/value pair '{pair}'. Expected KEY=VALUE syntax."
            )
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise argparse.ArgumentTypeError("keys must not be empty")
        values[key] = value
    try:
        return InstallerParameters.from_mapping(values)
    except KeyError as exc:
        raise argparse.ArgumentTypeError(str(exc.args[0])) from exc


def _add_parameter_arguments(parser: argparse.ArgumentParser) -> None:
    defaults = InstallerParameters.defaults()
    parser.add_argument("--name", default=defaults.package_name, help="Package name (com.author.name)")
    parser.add_argument("--version", default=defaults.version, help="Package version (major.minor.patch)")
    parser.add_argument("--display-name", default=defaults.display_name, help="Display name of the package")
    parser.add_argument("--author", default=defaults.author_name, help="Author of the package")


def _parameters_from_args(args: argparse.Namespace) -> InstallerParameters:
    return InstallerParameters(
        package_name=args.name,
        version=args.version,
        display_name=args.display_name,
        author_name=args.author,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate installer packages from a template tree")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="generate an installer package")
    generate_parser.add_argument("destination", type=Path, help="Empty directory receiving the package")
    generate_parser.add_argument(
        "-p",
        "--project-root",
        type=Path,
        default=Path.cwd(),
        help="Root of the host project containing Assets/ and Packages/",
    )
    source = generate_parser.add_mutually_exclusive_group()
    source.add_argument("-t", "--templates", type=Path, help="Directory holding the template tree")
    source.add_argument(
        "-g",
        "--generator",
        type=Path,
        help="Generator package directory whose package.json names the template package",
    )
    _add_parameter_arguments(generate_parser)
    generate_parser.add_argument(
        "--copy-opaque",
        action="store_true",
        help="Copy files that are not text templates instead of skipping them",
    )
    generate_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    validate_parser = subparsers.add_parser("validate", help="check package parameters")
    _add_parameter_arguments(validate_parser)
    validate_parser.add_argument(
        "-p",
        "--project-root",
        type=Path,
        help="Also check that the package does not exist in this project",
    )

    namespace_parser = subparsers.add_parser("namespace", help="print the namespace derived from a package name")
    namespace_parser.add_argument("name", help="Package name")

    render_parser = subparsers.add_parser("render", help="render a single template file")
    render_parser.add_argument("template", type=Path, help="Path to the template file")
    render_parser.add_argument(
        "-p",
        "--param",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Parameter values, keyed by identifier (PkgName) or field name (package_name)",
    )
    render_parser.add_argument("--namespace", help="Namespace value; derived from the package name by default")
    render_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the rendered template to this path instead of stdout",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _handle_generate(args: argparse.Namespace) -> int:
    settings = GeneratorSettings.for_project(
        args.project_root,
        template_root=args.templates,
        generator_root=args.generator,
        copy_opaque=args.copy_opaque,
    )
    index = LocalAssetIndex(settings.project_root)
    parameters = _parameters_from_args(args)
    try:
        report = ensure_generatable(parameters, index)
    except (ParameterValidationError, DuplicatePackageError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    for message in report.messages():
        print(f"warning: {message}", file=sys.stderr)

    destination = args.destination
    destination.mkdir(parents=True, exist_ok=True)
    materializer = PackageMaterializer(index, LocalReloadLock(), settings)
    try:
        result = materializer.generate(destination, parameters)
    except InstallerGeneratorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(f"Package {parameters.package_name} generated at {result.destination}")
    return EXIT_OK


def _handle_validate(args: argparse.Namespace) -> int:
    parameters = _parameters_from_args(args)
    report = validate_parameters(parameters)
    for message in report.messages():
        print(message)
    if (
        args.project_root is not None
        and not report.invalid_name
        and not check_package_absent(parameters.package_name, LocalAssetIndex(args.project_root))
    ):
        print(f"package '{parameters.package_name}' already exists in the project")
        return EXIT_INVALID
    if not report.valid:
        return EXIT_INVALID
    print("parameters are valid")
    return EXIT_OK


def _handle_namespace(args: argparse.Namespace) -> int:
    try:
        print(derive_namespace(args.name))
    except InstallerGeneratorError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    return EXIT_OK


def _handle_render(args: argparse.Namespace) -> int:
    parameters = _parse_key_value_pairs(args.param)
    namespace = args.namespace
    if namespace is None:
        namespace = derive_namespace(parameters.package_name) if parameters.package_name.strip() else ""
    rendered = MarkerSubstitutor().render_file(
        args.template,
        parameters.context(),
        namespace,
        target=args.output,
    )
    if args.output is None:
        sys.stdout.write(rendered)
        if not rendered.endswith("\n"):
            sys.stdout.write("\n")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "generate":
        return _handle_generate(args)
    if args.command == "validate":
        return _handle_validate(args)
    if args.command == "namespace":
        return _handle_namespace(args)
    if args.command == "render":
        return _handle_render(args)
    parser.error("no command provided")
    return EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

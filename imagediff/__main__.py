"""imagediff: Visual difference between two equally sized images.

Usage: imagediff <left> <right> [options]

Render modes are auto-discovered from imagediff/modes/.
Each mode module's docstring is its documentation.
Run `imagediff --list-modes` to see them.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, imagediff looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import importlib
import logging
import os
import sys
import tempfile

from PIL import Image

from imagediff import registry
from imagediff.core.composite import compose
from imagediff.core.env import env_defaults, load_env
from imagediff.core.errors import ImageDiffError
from imagediff.core.report import format_json, format_text
from imagediff.core.scheduler import run_diff
from imagediff.core.types import DiffConfig, DiffReport

logger = logging.getLogger('imagediff')


def _build_parser(defaults: dict) -> argparse.ArgumentParser:
    epilog = (
        'Examples:\n'
        '  Basic non-normalized difference:\n'
        '    imagediff image1.png image2.png\n'
        '  Normalized grayscale difference with custom scale:\n'
        '    imagediff image1.png image2.png --normalized --diff-mode gray --normalized-scale 25.0\n'
        '  Composite output with verbose logging:\n'
        '    imagediff image1.png image2.png --include-inputs --verbose\n'
        '  CI gate, fail above 0.5% differing pixels:\n'
        '    imagediff ref.png current.png -o diff.png --fail-on-diff 0.5\n'
        '\n'
        'Config env vars (set in .env or environment):\n'
        '  IMAGEDIFF_DIFF_MODE, IMAGEDIFF_SCALE, IMAGEDIFF_NORMALIZED_SCALE,\n'
        '  IMAGEDIFF_WORKERS, IMAGEDIFF_OUTPUT_DIR\n'
    )
    parser = argparse.ArgumentParser(
        prog='imagediff',
        description='Visual difference between two equally sized images.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument('left', nargs='?', help='Left input image')
    parser.add_argument('right', nargs='?', help='Right input image')
    parser.add_argument('-o', '--output', help='Output PNG (default: temporary file)')
    parser.add_argument(
        '-i',
        '--include-inputs',
        action='store_true',
        help='Place the inputs left and right of the diff in the output',
    )
    parser.add_argument(
        '-n',
        '--normalized',
        action='store_true',
        help='Use normalized difference (adjusts for brightness/contrast)',
    )
    parser.add_argument(
        '-s',
        '--scale',
        type=float,
        default=defaults['scale'],
        help=f'Scale factor for non-normalized mode (default: {defaults["scale"]})',
    )
    parser.add_argument(
        '--normalized-scale',
        type=float,
        default=defaults['normalized_scale'],
        help=f'Scale factor for normalized mode (default: {defaults["normalized_scale"]})',
    )
    parser.add_argument(
        '-m',
        '--diff-mode',
        choices=sorted(registry.all_modes()),
        default=defaults['diff_mode'],
        help=f'Difference mode (default: {defaults["diff_mode"]})',
    )
    parser.add_argument(
        '-w',
        '--workers',
        type=int,
        default=defaults['workers'],
        help='Parallelism hint (default: number of CPUs)',
    )
    parser.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
    parser.add_argument(
        '-d',
        '--fail-on-diff',
        type=float,
        default=None,
        metavar='PCT',
        help='Exit 1 if more than PCT percent of pixels differ (CI gating)',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('--list-modes', action='store_true', help='Print the available diff modes')
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    return parser


def _print_modes() -> None:
    """Print every render mode with the full docstring of its module."""
    for name, mode in sorted(registry.all_modes().items()):
        mod = importlib.import_module(f'imagediff.modes.{name}')
        doc = (mod.__doc__ or '').strip() or mode.help
        print(f'{name} ({mode.label})')
        for line in doc.splitlines():
            print(f'    {line}' if line else '')
        print()


def _build_config(args: argparse.Namespace) -> DiffConfig:
    return DiffConfig(
        normalized=args.normalized,
        scale=args.normalized_scale if args.normalized else args.scale,
        diff_mode=args.diff_mode,
        verbose=args.verbose,
        workers=args.workers,
    )


def _output_path(args: argparse.Namespace, output_dir: str | None) -> str:
    if args.output:
        return args.output
    fd, path = tempfile.mkstemp(prefix='imagediff-', suffix='.png', dir=output_dir)
    os.close(fd)
    logger.debug('Created temporary output file: %s', path)
    return path


def _pre_parse_env_file(argv: list[str]) -> str | None:
    """Find --env-file before the full parse, since .env values feed the defaults."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument('--env-file', default=None)
    known, _ = pre.parse_known_args(argv)
    return known.env_file


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]

    # Load .env before parsing, OS env vars always win
    env_path = load_env(env_file=_pre_parse_env_file(argv))
    if env_path:
        print(f'imagediff: loaded {env_path}', file=sys.stderr)

    try:
        defaults = env_defaults()
    except ImageDiffError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    parser = _build_parser(defaults)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s:%(lineno)d %(message)s',
    )

    if args.list_modes:
        _print_modes()
        return

    if not args.left or not args.right:
        print('Error: Both left and right input files are required', file=sys.stderr)
        parser.print_help(sys.stderr)
        sys.exit(1)

    for path in (args.left, args.right):
        if not os.path.isfile(path):
            print(f'Error: image not found: {path}', file=sys.stderr)
            sys.exit(1)

    logger.debug('Starting imagediff with left=%s, right=%s', args.left, args.right)
    config = _build_config(args)

    try:
        left = Image.open(args.left).convert('RGBA')
        right = Image.open(args.right).convert('RGBA')
        result = run_diff(left, right, config)

        final = result.image
        if args.include_inputs:
            logger.debug('Creating composite image with inputs')
            final = compose(left, result.image, right)

        output = _output_path(args, defaults['output_dir'])
        logger.debug('Encoding image to %s', output)
        Image.fromarray(final).save(output, format='PNG')
    except (ImageDiffError, OSError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    mode = registry.get(config.diff_mode)
    report = DiffReport(
        left_path=args.left,
        right_path=args.right,
        output_path=output,
        width=result.width,
        height=result.height,
        mode=mode.name,
        mode_label=mode.label,
        scale=config.scale,
        normalized=config.normalized,
        composite=args.include_inputs,
        chunks=result.chunks,
        counts=result.counts,
    )
    if result.left_stats and result.right_stats:
        report.stats = {'left': result.left_stats.as_dict(), 'right': result.right_stats.as_dict()}

    if args.json:
        print(format_json(report))
    else:
        print(format_text(report))

    # CI gate runs after output so the report is visible even on failure
    if args.fail_on_diff is not None and report.diff_pct > args.fail_on_diff:
        print(
            f'\nFAIL: {report.diff_pct:.2f}% of pixels differ (threshold {args.fail_on_diff}%)',
            file=sys.stderr,
        )
        sys.exit(1)


if __name__ == '__main__':
    main()

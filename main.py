import argparse
import sys

from tasks.collect import run_collect
from tasks.analyze_image import run_analyze_image
from tasks.snapshot_report import run_snapshot_report

def main():
    """
    The main entry point for the command-line interface.
    """
    parser = argparse.ArgumentParser(
        description="Collects butterfly data, images and pdf files from the biokite world butterfly index."
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    collect_parser = subparsers.add_parser(
        "collect",
        help="Scrape the region pages, download assets and store everything as JSON."
    )
    collect_parser.add_argument(
        '--skip-images',
        action='store_true',
        help="Do not download the butterfly images."
    )
    collect_parser.add_argument(
        '--skip-pdfs',
        action='store_true',
        help="Do not download the pdf files."
    )
    collect_parser.add_argument(
        '--skip-colors',
        action='store_true',
        help="Do not query Cloud Vision for dominant colors."
    )
    collect_parser.add_argument(
        '--skip-csv',
        action='store_true',
        help="Do not merge the reference data from butterfly.csv."
    )
    collect_parser.add_argument(
        '--from-snapshot',
        type=str,
        metavar="PATH",
        help="Start from a previously saved JSON file instead of scraping the pages."
    )
    collect_parser.add_argument(
        '--output', '-o',
        type=str,
        metavar="PATH",
        help="Where to write the JSON file. Defaults to ./assets/butterfly.json."
    )
    collect_parser.add_argument(
        '--report',
        action='store_true',
        help="Also generate an HTML report of every warning raised during the run."
    )
    collect_parser.set_defaults(handler=run_collect)

    analyze_parser = subparsers.add_parser(
        "analyze-image",
        help="Print the dominant colors of a single image."
    )
    analyze_parser.add_argument(
        "image_url",
        type=str,
        help="Absolute URL, or a path relative to the site root."
    )
    analyze_parser.set_defaults(handler=run_analyze_image)

    report_parser = subparsers.add_parser(
        "report",
        help="Generate an HTML summary of an existing JSON file."
    )
    report_parser.add_argument(
        "snapshot",
        type=str,
        help="Path to the JSON file to summarize."
    )
    report_parser.set_defaults(handler=run_snapshot_report)

    args = parser.parse_args()

    if hasattr(args, 'handler'):
        if args.command == 'collect':
            args.handler(
                images=not args.skip_images,
                pdfs=not args.skip_pdfs,
                colors=not args.skip_colors,
                csv=not args.skip_csv,
                from_snapshot=args.from_snapshot,
                output=args.output,
                report=args.report
            )
        elif args.command == 'analyze-image':
            args.handler(args.image_url)
        elif args.command == 'report':
            args.handler(args.snapshot)
    else:
        parser.print_help()
        sys.exit(1)

if __name__ == "__main__":
    main()

import argparse
import sys
import zipfile

from loguru import logger

from .decoder import analyse
from .errors import ResParserError
from .printer import convert, tostring
from .tree import parse

MANIFEST_NAME = "AndroidManifest.xml"


def read_axml(path: str) -> bytes:
    """
    Read an AXML file, or the manifest inside an APK.
    """
    if zipfile.is_zipfile(path):
        with zipfile.ZipFile(path) as apk:
            return apk.read(MANIFEST_NAME)
    with open(path, "rb") as fp:
        return fp.read()


def setup_logging(verbose: bool) -> None:
    logger.remove()  # All configured handlers are removed
    fmt = "{line: >4}:{level}:\t{message}"
    logger.add(sys.stderr, format=fmt, level="DEBUG" if verbose else "WARNING")
    logger.enable("axml2xml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="axml2xml",
        description="Convert Android binary XML (or the manifest of an APK) to XML text.",
    )
    parser.add_argument("path", help="binary XML file or APK")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every decoded chunk")
    parser.add_argument("--strict", action="store_true", help="reject files with unexpected header words")
    parser.add_argument("--lxml", action="store_true", help="render escaped XML through lxml")
    parser.add_argument("--strings", action="store_true", help="dump the string pool instead of the XML")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        buff = read_axml(args.path)
        if args.strings:
            analyse(buff, strict=args.strict).strings.show()
        elif args.lxml:
            root = parse(buff, strict=args.strict)
            if root is not None:
                sys.stdout.write(tostring(root).decode("utf-8"))
        else:
            sys.stdout.write(convert(buff, strict=args.strict))
    except (OSError, KeyError) as e:
        logger.error("Can not read '{}': {}".format(args.path, e))
        return 1
    except ResParserError as e:
        logger.error("Error parsing '{}': {}".format(args.path, e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

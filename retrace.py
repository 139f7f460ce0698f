"""Deobfuscate Java stack traces mangled by ProGuard or R8.

Reads a stack trace from a file or stdin and writes it back with every
known frame replaced by its original frames, e.g.:

    adb logcat | retrace mapping.txt
"""

import argparse
import sys

from mapper import ProguardMapper
from parser import parse_map_file


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('mapping_file',
                        help='ProGuard mapping file from the build the stacktrace is from.')
    parser.add_argument('--stacktrace',
                        help='Stacktrace file to be deobfuscated (default: stdin).')
    parser.add_argument('--class', dest='class_name',
                        help='Only print the original name of this obfuscated class.')
    parser.add_argument('--verbose', action='store_true',
                        help='Print mapping details to stderr.')
    args = parser.parse_args(argv)

    try:
        mapping = parse_map_file(args.mapping_file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read mapping file: {e}", file=sys.stderr)
        return 1
    mapper = ProguardMapper(mapping)

    if args.verbose:
        print(f"Loaded {len(mapper.classes)} classes from {args.mapping_file}", file=sys.stderr)
        print(f"  UUID: {mapping.uuid()}", file=sys.stderr)
        print(f"  line info: {'yes' if mapping.has_line_info() else 'no'}", file=sys.stderr)

    if args.class_name:
        print(mapper.remap_class(args.class_name) or args.class_name)
        return 0

    if args.stacktrace:
        try:
            with open(args.stacktrace, "r", encoding="utf-8", errors="replace") as f:
                text = f.read()
        except OSError as e:
            print(f"Error: cannot read stacktrace: {e}", file=sys.stderr)
            return 1
    else:
        # undecodable bytes pass through as replacement characters
        if hasattr(sys.stdin, "reconfigure"):
            sys.stdin.reconfigure(errors="replace")
        text = sys.stdin.read()

    mapper.write_stacktrace(text, sys.stdout)
    return 0


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
Print the delta ops for a Markdown document.

Run with: python scripts/convert_markdown.py [FILE]

Reads FILE, or stdin when no file is given. Converter options come from the
MD_DELTA_* environment variables; set MD_DELTA_DEBUG=1 to see per-node traces.
"""

import json
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import ConverterOptions  # noqa: E402
from core.errors import DeltaConversionError  # noqa: E402
from delta.converter import MarkdownToDeltaConverter  # noqa: E402


def main(argv: list[str]) -> int:
    options = ConverterOptions.from_env()
    logging.basicConfig(
        level=logging.DEBUG if options.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if len(argv) > 1:
        with open(argv[1], encoding="utf-8") as f:
            markdown_text = f.read()
    else:
        markdown_text = sys.stdin.read()

    converter = MarkdownToDeltaConverter(options)
    try:
        ops = converter.convert(markdown_text)
    except DeltaConversionError as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(ops, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))

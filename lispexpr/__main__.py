"""CLI: python -m lispexpr <expression>"""

import sys

from .reader import FOUND, read_expr


def main():
    if len(sys.argv) != 2:
        print("Usage: python -m lispexpr <expression>", file=sys.stderr)
        sys.exit(2)

    result = read_expr(sys.argv[1])
    print(result)
    if result != FOUND:
        sys.exit(1)


if __name__ == "__main__":
    main()

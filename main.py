# main.py
import sys

from chainscan.cli.cli import CLI


def main():
    cli = CLI()
    return cli.main(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())

import sys

from slack_message.cli import main


if __name__ == '__main__':
    sys.exit(main())

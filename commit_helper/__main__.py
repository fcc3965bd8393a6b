import sys

from commit_helper.cli import main_cli

sys.exit(main_cli())

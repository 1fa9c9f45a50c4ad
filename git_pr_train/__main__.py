import sys

from git_pr_train.cli.main import main

sys.exit(main())

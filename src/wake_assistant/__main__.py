import sys

from wake_assistant.main import main

sys.exit(main())

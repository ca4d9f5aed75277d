"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["ns", "tree", "ls", "mkdir", "rmdir", "upload", "download", "rm", "search", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E86DE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;134;222m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
  ==============================
     A S K D O C   ::   docs
  ==============================
{RESET}"""

WELCOME_TITLE = "AskDoc CLI - Document Folders and Files"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "askdoc> "

HELP_TEXT = """Available commands:
  ns <mine|shared>                    Switch the active namespace
  tree                                Show the folder tree
  ls [root|<folder_id>]               List files (all, root only, or one folder)
  mkdir <name> [parent_id]            Create a folder
  rmdir <folder_id>                   Delete a folder with everything inside it
  upload <path> [folder_id]           Upload a local file
  download <file_id> [output_path]    Download a file (defaults to its own name)
  rm <file_id>                        Delete a file
  search <term>                       Search file names (newest first)
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  ns shared
  mkdir "Meeting Notes"
  mkdir 2024 3
  upload ./report.pdf 4
  ls root
  search report
  rmdir 3"""

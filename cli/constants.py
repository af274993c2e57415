"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "assign", "upload", "download", "delete", "lookup", "ls", "tag", "untag", "status", "clear", "exit", "help"
]

STYLE = Style.from_dict(
    {
        "prompt": "#3FA34D bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;63;163;77m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ███████╗███████╗ █████╗ ██╗    ██╗███████╗███████╗██████╗
 ██╔════╝██╔════╝██╔══██╗██║    ██║██╔════╝██╔════╝██╔══██╗
 ███████╗█████╗  ███████║██║ █╗ ██║█████╗  █████╗  ██║  ██║
 ╚════██║██╔══╝  ██╔══██║██║███╗██║██╔══╝  ██╔══╝  ██║  ██║
 ███████║███████╗██║  ██║╚███╔███╔╝███████╗███████╗██████╔╝
 ╚══════╝╚══════╝╚═╝  ╚═╝ ╚══╝╚══╝ ╚══════╝╚══════╝╚═════╝
{RESET}"""

WELCOME_TITLE = "Seaweed CLI - SeaweedFS master, volume and filer client"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "seaweed> "

DOWNLOADS_DIR = "downloads"

HELP_TEXT = """Available commands:
  assign [count] [collection]         Reserve a new fid on the master
  upload <file_path> [fid]            Upload a local file (overwrites fid when given)
  download <fid> [output_path]        Download an object (defaults to downloads/<fid>)
  delete <fid>                        Delete an object
  lookup <volume_id|fid>              Show the servers holding a volume
  ls [path] [limit] [pattern]         List a filer directory (default /)
  tag <path> key=value ...            Set tags on a filer path (keys start with Seaweed-)
  untag <path> [name ...]             Remove named tags, or all tags when none given
  status                              Show cluster status
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  assign
  upload report.pdf
  upload report.pdf 3,01637037d6
  download 3,01637037d6 downloads/report.pdf
  lookup 3
  ls /docs 50 *.pdf
  tag /docs/report.pdf Seaweed-Owner=alice Seaweed-Stage=draft
  untag /docs/report.pdf Seaweed-Stage
  delete 3,01637037d6"""

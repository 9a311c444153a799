import os
import sys
from argparse import ArgumentParser, Namespace

from config import Config
from domains.asana.asana_api_client import AsanaApiClient
from domains.asana.asana_fetch_service import AsanaFetchService
from domains.kanban.project_config import load_metrics_config
from utils.command.base_command import BaseCommand
from utils.env_loader import ensure_env_loaded
from utils.error.base_custom_error import BaseCustomError
from utils.file_manager import FileManager
from utils.logging.logging_manager import LogManager

DEFAULT_OUTPUT_FILE = "asana_data.json"


class AsanaFetchCommand(BaseCommand):
    @staticmethod
    def get_name() -> str:
        return "fetch"

    @staticmethod
    def get_description() -> str:
        return "Download projects, tasks and section-change stories from Asana into a JSON snapshot."

    @staticmethod
    def get_help() -> str:
        return (
            "Fetches every project listed in the configuration file, all tasks still open at "
            "the project horizon, their stories and assignees.\n\n"
            "Examples:\n"
            "  python src/main.py asana fetch --config-file projects.json\n"
            "  python src/main.py asana fetch --config-file projects.json --token-file ~/.asana_token "
            "--output-file data/asana_data.json"
        )

    @staticmethod
    def get_arguments(parser: ArgumentParser):
        parser.add_argument("--config-file", required=True, help="Project configuration JSON file")
        parser.add_argument("--token-file", help="File holding the Asana personal access token")
        parser.add_argument(
            "--output-file",
            help=f"Snapshot file (default: {DEFAULT_OUTPUT_FILE} in OUTPUT_DIR)",
        )
        parser.add_argument("--max-rps", type=float, help="Request-per-second cap (default: ASANA_MAX_RPS)")

    @staticmethod
    def main(args: Namespace):
        ensure_env_loaded(["ASANA_ACCESS_TOKEN"] if not args.token_file else None)
        logger = LogManager.get_instance().get_logger("AsanaFetchCommand")

        try:
            if args.token_file:
                token = FileManager.read_text(args.token_file).strip()
            else:
                token = os.getenv("ASANA_ACCESS_TOKEN") or Config.ASANA_ACCESS_TOKEN
            metrics_config = load_metrics_config(args.config_file)
            client = AsanaApiClient(
                base_url=os.getenv("ASANA_BASE_URL", Config.ASANA_BASE_URL),
                access_token=token,
                max_rps=args.max_rps or Config.ASANA_MAX_RPS,
            )
            output_file = args.output_file or os.path.join(Config.OUTPUT_DIR, DEFAULT_OUTPUT_FILE)

            snapshot = AsanaFetchService(client).fetch_to_file(metrics_config.projects, output_file)
        except (FileNotFoundError, ValueError, BaseCustomError) as e:
            logger.error(f"Asana fetch failed: {e}")
            sys.exit(1)

        logger.info(
            f"Fetched {len(snapshot['projects'])} projects, {len(snapshot['tasks'])} tasks "
            f"and {len(snapshot['users'])} users ({client.http.requests_made} requests)"
        )
        print(f"Asana snapshot saved to {output_file}")

from rich.pretty import pprint

from argosy import *


@program(
    help="Ship builds to the cloud.",
    version="0.1.0",
    commands=[{
        "method": "deploy_command",
        "params": [{"name": "region", "required": True, "accept_only": ["eu", "us"]}],
        "options": [{"name": "dry-run", "aliases": ["n"], "help": "Print what would be shipped"}],
    }],
)
class Shipyard(Program):
    settings = Settings(commands_enabled=True, boolean_options=("dry-run",))

    def deploy_command(self, region, *, dry_run=False):
        """Deploy the current build to a region."""
        pprint({"region": region, "dry_run": dry_run})

    async def status_command(self, *services, options):
        """Report the status of some services."""
        pprint({"services": list(services), "options": dict(options)})

    def on_invalid_command(self, name, params, options):
        self.show_help(fault=ExecutionError(f"unknown command {name!r}", hint="see the commands below"))


if __name__ == '__main__':
    raise SystemExit(Shipyard().start())

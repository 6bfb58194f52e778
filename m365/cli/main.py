"""Microsoft 365 CLI using CLIApp framework."""

from __future__ import annotations

from typing import Optional

from core.cli_framework import CLIApp

from .. import __version__
from ..flow.commands import run_flow_run_list
from ..spo.commands import run_spo_navigation_node_remove, run_spo_page_clientsidewebpart_add
from ..teams.commands import run_teams_guestsettings_list

app = CLIApp(
    "m365",
    "Manage Microsoft 365 (SharePoint Online, Teams, Power Automate) from the command line",
    version=__version__,
)

spo = app.group("spo", help="SharePoint Online")
page = spo.group("page", help="Modern pages")
webpart = page.group("clientsidewebpart", help="Client-side web parts on a modern page")
navigation = spo.group("navigation", help="Site navigation")
node = navigation.group("node", help="Navigation nodes")
teams = app.group("teams", help="Microsoft Teams")
guestsettings = teams.group("guestsettings", help="Team guest settings")
flow = app.group("flow", help="Power Automate (Microsoft Flow)")
run = flow.group("run", help="Flow runs")


# Note: @argument decorators must come BEFORE @command (decorators apply bottom-up)
@webpart.command("add", help="Add a client-side web part to a modern page")
@webpart.argument("--web-url", "--webUrl", "-u", dest="web_url", required=True,
                  help="URL of the site where the page is located")
@webpart.argument("--page-name", "--pageName", "-n", dest="page_name", required=True,
                  help="Name of the page (.aspx is appended when missing)")
@webpart.argument("--standard-web-part", "--standardWebPart", dest="standard_web_part",
                  help="Name of a standard web part, e.g. Image or QuickLinks")
@webpart.argument("--web-part-id", "--webPartId", dest="web_part_id",
                  help="ID of a custom web part")
@webpart.argument("--web-part-properties", "--webPartProperties", dest="web_part_properties",
                  help="JSON object merged into the web part properties")
@webpart.argument("--web-part-data", "--webPartData", dest="web_part_data",
                  help="JSON object merged into the web part data")
@webpart.argument("--section", type=int, help="Section number (default: last section)")
@webpart.argument("--column", type=int, help="Column number in the section (default: 1)")
@webpart.argument("--order", type=int, help="Position among the column's controls (default: last)")
def cmd_page_webpart_add(args) -> int:
    return run_spo_page_clientsidewebpart_add(args)


@node.command("remove", help="Remove a node from the site navigation")
@node.argument("--web-url", "--webUrl", "-u", dest="web_url", required=True,
               help="URL of the site")
@node.argument("--location", "-l", required=True, help="QuickLaunch or TopNavigationBar")
@node.argument("--id", "-i", required=True, help="ID of the node to remove")
@node.argument("--confirm", action="store_true", help="Don't prompt for confirmation")
def cmd_navigation_node_remove(args) -> int:
    return run_spo_navigation_node_remove(args)


@guestsettings.command("list", help="List the guest settings of a team")
@guestsettings.argument("--team-id", "--teamId", "-i", dest="team_id", required=True,
                        help="ID of the team")
def cmd_teams_guestsettings_list(args) -> int:
    return run_teams_guestsettings_list(args)


@run.command("list", help="List runs of a flow")
@run.argument("--environment", "-e", required=True, help="Name of the environment the flow lives in")
@run.argument("--flow", "-f", required=True, help="Name of the flow")
def cmd_flow_run_list(args) -> int:
    return run_flow_run_list(args)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the m365 CLI."""
    return app.run(argv)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

"""
Access rule commands.
"""

import json
from pathlib import Path
from typing import List, Optional

import typer

from manila_csi import configuration
from manila_csi.cli.lib.config import build_client, load_config
from manila_csi.context import CancellableContext, background
from manila_csi.options import ShareOptions, parse_option_pairs
from manila_csi.shareadapters import (
    GrantAccessArgs,
    SecretArgs,
    VolumeContextArgs,
    get_share_adapter,
)

app = typer.Typer(help="Access rule commands")


@app.command()
def grant(
    share_id: str = typer.Option(..., "--share-id", help="Manila share ID"),
    option: List[str] = typer.Option(
        [], "--option", "-o", help="Share option as key=value (e.g., cephfs-mounter=kernel)"
    ),
    config_file: Optional[Path] = typer.Option(None, "--config-file", help="Configuration file"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Give up after this many seconds (default: no limit)"
    ),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Print the access key"),
):
    """
    Grant access to a share and wait until it is usable.

    Reuses a matching access rule when one exists, waits for its access key,
    and prints the rule with the volume context and node stage secret as JSON.
    """
    try:
        options = ShareOptions.from_dict(parse_option_pairs(option))
        conf = load_config(config_file)
        client = build_client(conf)
        context = CancellableContext(timeout=timeout)

        share = client.get_share(context, share_id)
        adapter = get_share_adapter(
            share.share_proto, configuration=getattr(conf, configuration.CONF_GROUP)
        )

        access_right = adapter.get_or_grant_access(
            context, GrantAccessArgs(share=share, manila_client=client, options=options)
        )

        locations = client.get_export_locations(context, share_id)
        volume_context = adapter.build_volume_context(
            VolumeContextArgs(locations=locations, options=options)
        )
        stage_secret = adapter.build_node_stage_secret(SecretArgs(access_right=access_right)) or {}
        publish_secret = adapter.build_node_publish_secret(SecretArgs(access_right=access_right)) or {}

        if not show_secrets and stage_secret.get("userKey"):
            stage_secret = dict(stage_secret, userKey="***")

        typer.echo(
            json.dumps(
                {
                    "access_right": access_right.to_dict(mask_key=not show_secrets),
                    "volume_context": volume_context,
                    "node_stage_secret": stage_secret,
                    "node_publish_secret": publish_secret,
                },
                indent=2,
                sort_keys=True,
            )
        )

    except Exception as e:
        typer.echo(f"Error granting access: {e}", err=True)
        raise typer.Exit(1)


@app.command("list")
def list_access(
    share_id: str = typer.Option(..., "--share-id", help="Manila share ID"),
    config_file: Optional[Path] = typer.Option(None, "--config-file", help="Configuration file"),
):
    """
    List access rules of a share.
    """
    try:
        conf = load_config(config_file)
        client = build_client(conf)
        rights = client.get_access_rights(background(), share_id)
        if not rights:
            typer.echo("No access rules found")
            return
        for r in rights:
            key_state = "yes" if r.access_key else "no"
            typer.echo(
                f"{r.id} type={r.access_type} to={r.access_to} level={r.access_level} "
                f"state={r.state} key={key_state}"
            )

    except Exception as e:
        typer.echo(f"Error listing access rules: {e}", err=True)
        raise typer.Exit(1)

"""
fleetctl channels command implementation.

Loads channel instances from fleet.yaml, summarizes them per channel type,
marks instances whose runtime lacks native support as proxied, and reports
credentials claimed by more than one agent instance.
"""

import sys
import json
import logging
import argparse
from dataclasses import asdict
from typing import List

from agentfleet.adapters.registry import AdapterRegistry
from agentfleet.core.exceptions import FleetError
from agentfleet.core.models import ChannelBinding, ChannelBindingStatus, ChannelConnectionStatus
from agentfleet.core.naming import now_unix_ms
from agentfleet.proxy import ProxyStatus, proxy_status
from agentfleet.store.channels import ChannelStore, hash_token
from agentfleet.support.config import BOT_TOKEN_KEY, load_fleet_config


logger = logging.getLogger(__name__)


def load_channel_store(config) -> ChannelStore:
    """Build a ChannelStore from the channels section of a FleetConfig.

    Declared bindings are loaded unchecked so conflicts surface in
    detect_conflicts() instead of aborting the load.
    """
    store = ChannelStore()
    for spec in config.channels:
        credentials = spec.resolve_credentials()
        store.upsert_config(
            spec.instance_name,
            spec.channel_type,
            credentials=credentials,
            options=spec.options,
        )
        token = credentials.get(BOT_TOKEN_KEY)
        if spec.instance_id and token:
            store.restore_binding(
                ChannelBinding(
                    instance_id=spec.instance_id,
                    channel_type=spec.channel_type,
                    bot_token_hash=hash_token(token),
                    status=ChannelBindingStatus.ACTIVE,
                    bound_at_unix_ms=now_unix_ms(),
                )
            )
            store.assign_channel(spec.instance_id, spec.instance_name)
    return store


def apply_proxy_routes(config, store: ChannelStore, registry: AdapterRegistry) -> List[ProxyStatus]:
    """Decide native vs proxied delivery for each instance that names a runtime.

    Proxied instances are recorded as PROXIED in the store's connection table.

    Returns:
        One ProxyStatus per routed instance, in fleet file order.
    """
    routes = []
    for spec in config.channels:
        if not spec.instance_id or not spec.runtime:
            continue
        adapter = registry.get(spec.runtime)
        if adapter is None:
            logger.warning(
                f"Channel {spec.instance_name}: runtime {spec.runtime} is not registered"
            )
            continue
        status = proxy_status(adapter.metadata(), spec.channel_type)
        if status.is_proxied:
            store.set_connection_status(
                spec.instance_id, spec.instance_name, ChannelConnectionStatus.PROXIED
            )
        routes.append(status)
    return routes


def cmd_channels(cli_instance, args: argparse.Namespace) -> int:
    """Summarize channel instances and binding conflicts.

    Args:
        cli_instance: FleetCLI instance
        args: Parsed command-line arguments with: file, json (optional)

    Returns:
        Exit code (0 when clean, 1 on error or if conflicts exist)
    """
    try:
        config = load_fleet_config(args.file)
        store = load_channel_store(config)
        routes = apply_proxy_routes(config, store, cli_instance.registry)
    except FleetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summaries = store.list_channel_summaries()
    conflicts = store.detect_conflicts()
    agents = sorted(
        {(s.instance_id, s.runtime) for s in config.channels if s.instance_id and s.runtime}
    )
    matrix = store.build_matrix(agents)

    if args.json:
        print(
            json.dumps(
                {
                    "channels": [asdict(s) for s in summaries],
                    "conflicts": [asdict(c) for c in conflicts],
                    "proxies": [r.to_dict() for r in routes],
                    "matrix": [asdict(row) for row in matrix],
                },
                indent=2,
            )
        )
    else:
        if not summaries:
            print("No channels configured")
        for summary in summaries:
            print(f"{summary.channel_type:<12} instances={summary.instance_count}")
        for route in routes:
            if route.is_proxied:
                print(f"PROXY {route.channel_type} via {route.runtime}")
        for conflict in conflicts:
            owners = ", ".join(conflict.instance_ids)
            print(
                f"CONFLICT {conflict.channel_type} token {conflict.bot_token_hash[:8]}: {owners}",
                file=sys.stderr,
            )

    return 1 if conflicts else 0

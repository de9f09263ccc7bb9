#!/usr/bin/env python
"""
Example: Create a Kubernetes cluster and wait until it is running.

This example demonstrates:
- Loading the access token from the environment or a .env file
- Creating a client using the factory
- Idempotent cluster creation (re-running the script reuses the existing cluster)
- Waiting for the cluster to reach the running state
- Downloading its kubeconfig, and optionally destroying it again

Usage:
    # Create a cluster in the default VPC of nyc1
    python examples/create_cluster.py prod-cluster-01 --region nyc1 --version 1.29.1-do.0

    # Save the kubeconfig next to the script
    python examples/create_cluster.py prod-cluster-01 --kubeconfig kubeconfig.yaml

    # Destroy the cluster and wait until it is gone
    python examples/create_cluster.py prod-cluster-01 --destroy

Requirements:
    Set one of these environment variables or put it in a .env file:
    - DIGITALOCEAN_TOKEN
    - DIGITALOCEAN_ACCESS_TOKEN
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script (e.g. python examples/create_cluster.py)
if __package__ is None:  # pragma: no cover - runtime convenience
    sys.path.append(str(Path(__file__).resolve().parents[1]))

from digitalocean_client.config import ConfigManager
from digitalocean_client.exceptions import (
    ConfigurationError,
    DigitalOceanError,
    OperationTimeout,
    PendingDeletionError,
    UnsupportedCombinationError,
)
from digitalocean_client.factory import DigitalOceanClientFactory
from digitalocean_client.models import KubernetesState
from digitalocean_client.services.kubernetes_service import KubernetesService, node_pool
from digitalocean_client.services.network_service import NetworkService


def main() -> int:
    """Main entry point for the example."""
    parser = argparse.ArgumentParser(description="Create a DigitalOcean Kubernetes cluster")
    parser.add_argument("name", help="Cluster name")
    parser.add_argument("--region", default="nyc1", help="Region slug (default: nyc1)")
    parser.add_argument("--version", default="latest", help="Kubernetes version slug (default: latest)")
    parser.add_argument("--size", default="s-1vcpu-2gb", help="Droplet size of the nodes (default: s-1vcpu-2gb)")
    parser.add_argument("--nodes", type=int, default=3, help="Number of nodes (default: 3)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=30 * 60,
        help="Seconds to wait for the cluster to become ready (default: 1800)",
    )
    parser.add_argument("--kubeconfig", type=Path, help="Write the kubeconfig file to this path")
    parser.add_argument("--destroy", action="store_true", help="Destroy the cluster instead of creating it")
    parser.add_argument("--dotenv", type=Path, help="Path to .env file (default: ./.env)")
    parser.add_argument("--verbose", action="store_true", help="Log every HTTP request")

    args = parser.parse_args()

    if args.nodes <= 0:
        print("Error: --nodes must be a positive integer")
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        # Step 1: Load credentials
        print("Loading credentials...")
        config = ConfigManager(dotenv_path=args.dotenv) if args.dotenv else ConfigManager()

        # Step 2: Create client using factory
        with DigitalOceanClientFactory.create_from_config(config) as client:
            print("Client initialized")
            clusters = KubernetesService(client)

            if args.destroy:
                cluster = clusters.find_cluster(lambda candidate: candidate.name == args.name)
                if cluster is None:
                    print(f"Cluster {args.name} does not exist")
                    return 0
                print(f"Destroying cluster {cluster.name} ({cluster.id})")
                clusters.destroy_cluster(cluster.id)
                clusters.wait_for_destroy(cluster, timeout=args.timeout)
                print("Cluster destroyed")
                return 0

            # Step 3: Place the cluster in the region's default VPC, if there is one
            vpc = NetworkService(client).get_default_vpc(args.region)
            if vpc is not None:
                print(f"Using VPC {vpc.name} ({vpc.ip_range})")

            # Step 4: Create the cluster, or pick up the one created by a previous run
            result = clusters.create_cluster(
                args.name,
                args.region,
                args.version,
                [node_pool(f"{args.name}-default", args.size, args.nodes)],
                vpc_uuid=vpc.id if vpc else None,
            )
            if result.created:
                print(f"Cluster created: {result.resource.id}")
            else:
                print(f"Cluster already exists: {result.resource.id}")

            # Step 5: Wait until the cluster is ready
            cluster = clusters.wait_for(result.resource, KubernetesState.RUNNING, timeout=args.timeout)
            print(f"Cluster {args.name} is running")

            if args.kubeconfig and cluster is not None:
                args.kubeconfig.write_text(clusters.get_kubeconfig(cluster.id), encoding="utf-8")
                print(f"kubeconfig written to {args.kubeconfig}")
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        print("\nPlease set DIGITALOCEAN_TOKEN or create a .env file containing it.")
        return 1

    except UnsupportedCombinationError as e:
        print(f"The server rejected the requested configuration: {e}")
        return 1

    except PendingDeletionError as e:
        print(f"Cannot reuse the name yet: {e}")
        return 1

    except OperationTimeout as e:
        print(f"Timed out: {e}")
        return 1

    except DigitalOceanError as e:
        print(f"DigitalOcean API error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""CLI entrypoint: build a graph artifact from a docs tree, or inspect one."""

import argparse
import json
import logging
from pathlib import Path
from typing import List

from .config import load_settings
from .errors import ConfigurationError
from .graph_builder import build_graph, write_graph
from .query import GraphQuery

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compile a markdown docs tree into a knowledge/workflow graph.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build graph JSON from a docs directory.")
    build.add_argument("--input", "-i", default=None, help="Docs directory (or DOC_GRAPH_DOCS_PATH).")
    build.add_argument("--output", "-o", default=None, help="Where to save the graph JSON.")
    build.add_argument("--base-url", default=None, help="Public site URL used to fill node urls.")
    build.add_argument("--log-level", default=None, help="Logging level (default INFO).")

    inspect = subparsers.add_parser("inspect", help="Inspect a built graph JSON file.")
    inspect.add_argument("--graph", "-g", default="graph.json", help="Graph JSON file.")
    inspect.add_argument("--stats", action="store_true", help="Show statistics.")
    inspect.add_argument("--nodes", action="store_true", help="List all nodes.")
    inspect.add_argument("--type", dest="node_type", default=None, help="List nodes of one type.")
    inspect.add_argument("--node", default=None, help="Show one node by id, id prefix or slug.")
    inspect.add_argument("--edges", action="store_true", help="List all edges.")
    inspect.add_argument("--orphans", action="store_true", help="List nodes without edges.")
    inspect.add_argument("--unresolved", action="store_true", help="List unresolved references.")
    return parser.parse_args(argv)


def run_build(args: argparse.Namespace) -> int:
    settings = load_settings(
        docs_path=args.input,
        output_path=args.output,
        base_url=args.base_url,
        log_level=args.log_level,
    )
    configure_logging(settings.log_level)
    try:
        result = build_graph(settings.docs_path, settings=settings)
    except ConfigurationError as error:
        logger.error("%s: %s", error.error_type, error.message)
        return 1

    output_path = write_graph(result.graph, settings.output_path)
    stats = result.graph.stats
    print(f"Graph artifact saved to: {output_path.resolve()}")
    print("Counts:", f"nodes={stats.total_nodes}", f"edges={stats.total_edges}", f"unresolved={stats.unresolved_refs}")
    for node_type, count in stats.nodes_by_type.items():
        print(f"  {node_type}: {count}")
    for edge_type, count in stats.edges_by_type.items():
        print(f"  {edge_type}: {count}")
    if result.warnings:
        print(f"{len(result.warnings)} warning(s):")
        for warning in result.warnings:
            print(f"  - {warning}")
    return 0


def run_inspect(args: argparse.Namespace) -> int:
    graph_path = Path(args.graph)
    if not graph_path.exists():
        print(f"Graph file not found: {graph_path.resolve()}")
        return 1
    query = GraphQuery.from_file(graph_path)

    show_stats = args.stats or not any(
        [args.nodes, args.node_type, args.node, args.edges, args.orphans, args.unresolved]
    )
    if show_stats:
        stats = query.stats
        print(f"Version:    {query.payload.get('version')}")
        print(f"Generated:  {query.payload.get('generated_at')}")
        print(f"Source:     {query.payload.get('source_dir')}")
        print(f"Nodes:      {stats.get('total_nodes', 0)}")
        print(f"Edges:      {stats.get('total_edges', 0)}")
        print(f"Unresolved: {stats.get('unresolved_refs', 0)}")
        for node_type, count in stats.get("nodes_by_type", {}).items():
            print(f"  {node_type:<12} {count}")
        for edge_type, count in stats.get("edges_by_type", {}).items():
            print(f"  {edge_type:<20} {count}")

    if args.nodes or args.node_type:
        nodes = query.filter_nodes(node_type=args.node_type)
        print(f"{args.node_type + ' nodes' if args.node_type else 'All nodes'} ({len(nodes)})")
        for node in nodes:
            print(f"  {node['id'][:8]}  {node['type']:<10}  {node.get('title', '')}")

    if args.node:
        node = query.get_node(args.node)
        if node is None:
            print(f"Node not found: {args.node}")
        else:
            print(json.dumps(node, ensure_ascii=False, indent=2))
            for edge in query.edges_for(node["id"], direction="both"):
                outgoing = edge["source"] == node["id"]
                other = edge["target"] if outgoing else edge["source"]
                print(f"  {'->' if outgoing else '<-'} {edge['type']:<18} {query.title_of(other)}")

    if args.edges:
        print(f"All edges ({len(query.edges)})")
        for edge in query.edges:
            print(f"  {query.title_of(edge['source'])} -[{edge['type']}]-> {query.title_of(edge['target'])}")

    if args.orphans:
        orphans = query.orphans()
        print(f"Orphan nodes ({len(orphans)})")
        for node in orphans:
            print(f"  {node['id'][:8]}  {node['type']:<10}  {node.get('title', '')}")

    if args.unresolved:
        unresolved = query.unresolved_edges()
        print(f"Unresolved references ({len(unresolved)})")
        for edge, ref in zip(unresolved, query.unresolved_refs()):
            print(f"  {ref} ({edge['type']} from {query.title_of(edge['source'])})")
    return 0


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "build":
        return run_build(args)
    return run_inspect(args)


if __name__ == "__main__":
    raise SystemExit(main())

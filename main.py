import argparse
import logging

from causal_graph import Graph, Node, read_graph_file


def build_demo_graph():
    """
    3-var graph with a directed chain and a latent confounder:
        X → Y
        Y → Z
        X ↔ Z  (latent U affects X and Z)
    plus X → Z on the same pair as the confounder.
    """
    X, Y, Z = Node("X"), Node("Y"), Node("Z")
    G = Graph([X, Y, Z])
    G.add_directed_edge(X, Y)
    G.add_directed_edge(Y, Z)
    G.add_directed_edge(X, Z)
    G.add_bidirected_edge(X, Z)
    return G


def _lookup(G, names):
    nodes = []
    for name in names:
        node = G.get_node(name)
        if node is None:
            raise SystemExit(f"Unknown node: {name}")
        nodes.append(node)
    return nodes


def main():
    parser = argparse.ArgumentParser(
        description="Answer structural queries over a mixed causal graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'graph',
        nargs='?',
        default=None,
        help='Graph file in Tetrad text format (default: a built-in 3-node demo graph)',
    )
    parser.add_argument(
        '--dsep',
        nargs=2,
        metavar=('X', 'Y'),
        help='Test whether X and Y are d-separated given --given',
    )
    parser.add_argument(
        '--given',
        type=str,
        default='',
        help='Comma-separated conditioning set for --dsep (default: empty)',
    )
    parser.add_argument(
        '--trek',
        nargs=2,
        metavar=('X', 'Y'),
        help='Test whether a trek joins X and Y',
    )
    parser.add_argument(
        '--ancestors',
        type=str,
        default=None,
        help='Comma-separated nodes whose ancestors to list',
    )
    parser.add_argument(
        '--cycle',
        action='store_true',
        help='Report whether the graph has a directed cycle',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log debug output from the graph engine',
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.graph:
        print(f"Loading graph from {args.graph}...")
        G = read_graph_file(args.graph)
    else:
        print("No graph file given; using the demo graph.")
        G = build_demo_graph()

    print()
    print(G)

    if args.dsep:
        x, y = _lookup(G, args.dsep)
        given = [name for name in args.given.split(',') if name]
        z = _lookup(G, given)
        verdict = "d-separated" if G.is_dseparated_from(x, y, z) else "d-connected"
        print(f"{x} and {y} are {verdict} given {{{', '.join(given)}}}")

    if args.trek:
        x, y = _lookup(G, args.trek)
        print(f"Trek between {x} and {y}: {G.exists_trek(x, y)}")

    if args.ancestors:
        nodes = _lookup(G, [name for name in args.ancestors.split(',') if name])
        print("Ancestors: " + ";".join(node.name for node in G.get_ancestors(nodes)))

    if args.cycle:
        print(f"Directed cycle: {G.exists_directed_cycle()}")


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from .core.evaluator import EinsumConfig, Evaluator
from .core.exceptions import EinsumError
from .core.odometer import SUMMED_ORDERS
from .core.operands import DenseOperand, load_operand
from .core.parser import parse_subscripts


def _load_operands(paths: List[Path]) -> List[DenseOperand]:
    operands = []
    for path in paths:
        try:
            operands.append(load_operand(path))
        except FileNotFoundError as exc:
            raise SystemExit(f"Operand file not found: {path}") from exc
        except EinsumError:
            raise
        except ValueError as exc:
            raise SystemExit(f"Could not load operand {path}: {exc}") from exc
    return operands


def _write_output(path: Path, tensor: np.ndarray) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix == ".npz":
        np.savez(path, tensor)
    elif suffix == ".json":
        path.write_text(json.dumps(tensor.tolist(), indent=2), encoding="utf-8")
    elif suffix == ".jsonl":
        with path.open("w", encoding="utf-8") as handle:
            for row in tensor.reshape(tensor.shape[0] if tensor.ndim else 1, -1):
                handle.write(json.dumps(row.tolist()) + "\n")
    else:
        np.save(path, tensor)


def _run(args: argparse.Namespace) -> None:
    config = EinsumConfig(summed_order=args.summed_order)
    evaluator = Evaluator(config)
    result = evaluator.run(args.subscripts, _load_operands(args.operands))
    tensor = result.to_numpy(dtype=evaluator.config.dtype)
    if args.out is None:
        np.set_printoptions(suppress=True)
        print(f"# shape={result.shape}")
        print(tensor)
        return
    _write_output(args.out, tensor)


def _explain(args: argparse.Namespace) -> None:
    evaluator = Evaluator(EinsumConfig(summed_order=args.summed_order, trace=True))
    evaluator.run(args.subscripts, _load_operands(args.operands))
    if args.json:
        print(json.dumps(evaluator.explain(json=True), indent=2))
    else:
        print(evaluator.explain())


def _parse(args: argparse.Namespace) -> None:
    spec = parse_subscripts(args.subscripts)
    summary = spec.to_dict()
    print(summary["subscripts"])
    print(f"free: {','.join(summary['free']) or '-'}")
    print(f"summed: {','.join(summary['summed']) or '-'}")


def _add_eval_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("subscripts", help="Einsum subscripts, e.g. 'ij,jk->ik'")
    parser.add_argument(
        "operands",
        nargs="+",
        type=Path,
        help="Operand files (.npy/.npz/.json), one per input in the subscripts",
    )
    parser.add_argument(
        "--summed-order",
        default="appearance",
        choices=list(SUMMED_ORDERS),
        help="Nesting order of summed indices (default: appearance)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="einloop command line utilities")
    subparsers = parser.add_subparsers(dest="cmd")

    run_parser = subparsers.add_parser("run", help="Evaluate an einsum over operand files")
    _add_eval_arguments(run_parser)
    run_parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Optional output path (.npy/.npz/.json/.jsonl). If omitted, prints the result",
    )

    explain_parser = subparsers.add_parser("explain", help="Evaluate and print the trace report")
    _add_eval_arguments(explain_parser)
    explain_parser.add_argument("--json", action="store_true", help="Emit the report as JSON")

    parse_parser = subparsers.add_parser("parse", help="Print the canonical form of subscripts")
    parse_parser.add_argument("subscripts", help="Einsum subscripts, e.g. 'ij,jk->ik'")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    handlers = {"run": _run, "explain": _explain, "parse": _parse}
    handler = handlers.get(args.cmd)
    if handler is None:
        parser.print_help()
        return 0
    try:
        handler(args)
    except EinsumError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))

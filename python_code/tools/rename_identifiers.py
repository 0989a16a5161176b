#!/usr/bin/env python
"""
Oracle-driven identifier renamer for Python files.
Default: dry-run. Use --apply to write changes.

Every binding (variables, parameters, functions, classes, imports) is renamed
with names proposed by a naming agent:
- dictionary: offline, style-preserving dictionary words (default)
- llm: the chat model configured through RUNPOD_TOKEN / RUNPOD_CHATBOT_URL / MODEL_NAME
Methods, class attributes and dunder names are left alone.
"""

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Dict

from agents import DictionaryAgent, NamingAgent, NamingAgentProtocol
from renaming import RenameConfig, RenameError, Registry, rename_identifiers


def build_agent(kind: str, seed: int) -> NamingAgentProtocol:
    if kind == "llm":
        return NamingAgent()
    return DictionaryAgent(seed=seed)


def process_file(py_path: Path, apply: bool, agent: NamingAgentProtocol, config: RenameConfig) -> Dict[str, Dict[str, str]]:
    src = py_path.read_text(encoding="utf-8")
    registry = Registry()
    new_code = rename_identifiers(src, agent.get_response, config=config, registry=registry)
    summary = {old: new for old, new in registry.renames.items() if old != new}
    if apply and new_code != src:
        py_path.write_text(new_code, encoding="utf-8")
    return {str(py_path): summary}


def main(argv=None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--root", default=os.getcwd())
    parser.add_argument("--apply", action="store_true")
    parser.add_argument("--agent", choices=["dictionary", "llm"], default="dictionary")
    parser.add_argument("--parallel", action="store_true")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.getenv("RENAME_LOG_LEVEL", "WARNING").upper())

    env_config = RenameConfig.from_env()
    config = RenameConfig(
        context_window=env_config.context_window,
        max_batch=env_config.max_batch,
        parallelism=env_config.parallelism,
        parallel=args.parallel or env_config.parallel,
    )
    agent = build_agent(args.agent, args.seed)

    root = Path(args.root)
    results: Dict[str, Dict[str, str]] = {}
    errors: Dict[str, str] = {}

    for path in sorted(root.rglob("*.py")):
        if path.resolve() == Path(__file__).resolve():
            continue
        try:
            results.update(process_file(path, args.apply, agent, config))
        except (RenameError, UnicodeDecodeError) as exc:
            errors[str(path)] = f"{type(exc).__name__}: {exc}"

    print(json.dumps({"apply": args.apply, "files": results, "errors": errors}, indent=2))


if __name__ == "__main__":
    main()

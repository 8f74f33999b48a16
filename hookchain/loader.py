"""Build listener chains from manifests."""

from __future__ import annotations

import importlib
import logging
from typing import Any

from hookchain.chain import ListenerChain
from hookchain.config import ChainManifest, ListenerSpec
from hookchain.errors import ManifestError

logger = logging.getLogger(__name__)


def resolve_target(target: str) -> Any:
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ManifestError(f"target {target!r} must look like 'package.module:attribute'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ManifestError(f"cannot import module {module_name!r} for target {target!r}") from exc
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise ManifestError(f"target {target!r} has no attribute {attr!r}") from exc
    return obj


def _register(chain: ListenerChain, spec: ListenerSpec) -> None:
    callback = resolve_target(spec.target)
    if not callable(callback):
        raise ManifestError(f"target {spec.target!r} for listener {spec.key!r} is not callable")
    receiver = resolve_target(spec.receiver) if spec.receiver else None

    if not spec.positioned:
        chain.add(spec.key, receiver, callback)
    elif spec.index is not None:
        chain.insert(spec.index, spec.key, receiver, callback)
    else:
        chain.insert({"after": spec.after, "before": spec.before}, spec.key, receiver, callback)


def build_chain(manifest: ChainManifest, chain: ListenerChain | None = None) -> ListenerChain:
    """Register every listener of ``manifest`` in listed order."""
    chain = chain if chain is not None else ListenerChain()
    for spec in manifest.listeners:
        _register(chain, spec)
    logger.info("Built chain %s with %s listeners: %s", manifest.name, len(chain), ", ".join(chain.keys()))
    return chain

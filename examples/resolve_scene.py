"""Example: resolving the layers of one scene inside a resolve scope.

Every layer is resolved once per scope no matter how often the composition
refers to it, and only fetched when its cache entry asks for it.
"""

import sys

from s3resolver import CacheState, create_engine

engine = create_engine()


def load_scene(layer_paths: list[str]) -> dict[str, str]:
    """Resolve and fetch all layers, returning identifier -> local path."""
    local_paths = {}
    with engine.scope():
        for path in layer_paths:
            resolved = engine.resolve(path)
            if not resolved:
                print(f"cannot resolve {path}", file=sys.stderr)
                continue

            info = engine.entry_info(path) if engine.matches_schema(path) else None
            if info is not None and info.state is not CacheState.FETCHED:
                if not engine.fetch_asset(path, resolved):
                    print(f"cannot fetch {path}", file=sys.stderr)
                    continue
                resolved = info.local_path

            local_paths[path] = resolved
    return local_paths


if __name__ == "__main__":
    for identifier, local_path in load_scene(sys.argv[1:]).items():
        print(f"{identifier} -> {local_path}")

from reflens.refs.cache import RefCache
from reflens.refs.session import RefSessions
from reflens.refs.resolver import SNAPSHOT_SCOPE, RefResolver, normalize_ref

__all__ = ["RefCache", "RefResolver", "RefSessions", "SNAPSHOT_SCOPE", "normalize_ref"]

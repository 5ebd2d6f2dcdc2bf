from typing import Optional

from loguru import logger


class NamespaceScope:
    """
    Mapping from namespace URI to the prefix currently bound to it.

    This is deliberately not a stack of frames: a second start mapping for
    a URI overwrites the first one (last writer wins), and an end mapping
    removes the URI whatever the nesting depth. Documents that redeclare a
    namespace therefore resolve it with the latest prefix until the first
    end mapping for that URI.
    """

    def __init__(self) -> None:
        self._prefixes = {}

    def __contains__(self, uri):
        return uri in self._prefixes

    def __len__(self):
        return len(self._prefixes)

    def __repr__(self):
        return "<NamespaceScope {}>".format(self._prefixes)

    def push(self, uri: Optional[str], prefix: Optional[str]) -> None:
        if uri in self._prefixes:
            logger.debug(
                "Namespace '{}' already mapped to prefix '{}', remapping to '{}'".format(
                    uri, self._prefixes[uri], prefix
                )
            )
        self._prefixes[uri] = prefix

    def pop(self, uri: Optional[str]) -> None:
        if uri not in self._prefixes:
            logger.warning(
                "Reached a NAMESPACE_END without having the namespace stored before? URI: {}".format(uri)
            )
            return
        del self._prefixes[uri]

    def prefix_for(self, uri: Optional[str]) -> Optional[str]:
        """
        :returns: the prefix bound to `uri`, or None if the URI is not in scope
        """
        return self._prefixes.get(uri)

    def qualify(self, uri: Optional[str], name: Optional[str]) -> Optional[str]:
        """
        Build the qualified name `prefix:name`, or the bare name when the URI
        has no non-empty prefix in scope.
        """
        prefix = self.prefix_for(uri)
        if prefix and name is not None:
            return "{}:{}".format(prefix, name)
        return name

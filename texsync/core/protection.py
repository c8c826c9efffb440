"""Placeholder protection for opaque regions during conversion."""

import re

from texsync.core.models import ProtectedBlock

PLACEHOLDER_PATTERN = re.compile(r"__PROTECTED_BLOCK_(\d+)__")


class ProtectedBlockStore:
    """call-scoped list of rendered fragments hidden behind placeholder tokens."""

    def __init__(self) -> None:
        self._blocks: list[ProtectedBlock] = []

    def __len__(self) -> int:
        return len(self._blocks)

    def protect(self, rendered_content: str) -> str:
        """
        stores rendered content and returns its placeholder token.

        Args:
            rendered_content: HTML fragment to shield from later passes

        Returns:
            placeholder token embedding the block index
        """
        block = ProtectedBlock(
            index=len(self._blocks), rendered_content=rendered_content
        )
        self._blocks.append(block)
        return block.token

    def restore_all(self, text: str, nested: bool = True) -> str:
        """
        replaces every placeholder token with its stored content in one pass.

        Args:
            text: text containing placeholder tokens
            nested: also expand tokens embedded in restored blocks; raw blocks
                that never wrap other blocks are restored without it

        Returns:
            text with protected content restored verbatim
        """
        if not nested:
            return PLACEHOLDER_PATTERN.sub(self._lookup, text)
        return self._expand(text, len(self._blocks))

    def _lookup(self, match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index >= len(self._blocks):
            return match.group(0)
        return self._blocks[index].rendered_content

    def _expand(self, text: str, limit: int) -> str:
        """restores tokens with index below limit, including tokens nested in blocks."""

        def replacer(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if index >= limit:
                # not one of ours, leaves literal text alone
                return match.group(0)
            # a block can only embed tokens created before it
            return self._expand(self._blocks[index].rendered_content, index)

        return PLACEHOLDER_PATTERN.sub(replacer, text)

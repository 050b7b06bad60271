"""
Graph Builder
=============

Bulk construction of a dependency graph from story (task) descriptors.

Descriptors are validated with pydantic, then loaded in two passes: every
story becomes a node first, then its declared dependency edges are wired.
A dependency id that was never declared as a story becomes an empty
placeholder node, unless strict mode is on, in which case the build is
rejected before the graph is touched.
"""

from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from depgraph.ordering.graph_store import GraphStore, tiebreak_key

logger = logging.getLogger(__name__)

StoryId = Union[str, int]


class OrderingError(Exception):
    """Base class for errors raised by the ordering engine."""
    pass


class InvalidStoryError(OrderingError):
    """Raised when a story descriptor cannot be parsed."""
    pass


class UndeclaredDependencyError(OrderingError):
    """Raised in strict mode when stories depend on ids that were never declared."""

    def __init__(self, missing: Dict[StoryId, List[StoryId]]):
        self.missing = missing
        details = ", ".join(f"{story} -> {deps}" for story, deps in missing.items())
        super().__init__(f"Undeclared dependencies: {details}")


class StoryDescriptor(BaseModel):
    """
    A unit of work to be ordered.

    Unknown fields are kept and merged into the node metadata.
    """
    model_config = ConfigDict(extra="allow")

    id: StoryId
    dependencies: List[StoryId] = Field(default_factory=list, description="Ids this story requires first")
    priority: Optional[Union[int, float]] = Field(None, description="Higher runs earlier among ready stories")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("dependencies", mode="before")
    @classmethod
    def _none_means_no_dependencies(cls, value):
        return [] if value is None else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_means_no_metadata(cls, value):
        return {} if value is None else value

    def node_metadata(self, default_priority: int) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            "priority": self.priority if self.priority is not None else default_priority
        }
        metadata.update(self.metadata)
        metadata.update(self.model_extra or {})
        return metadata


def parse_stories(stories: Iterable[Union[StoryDescriptor, Dict[str, Any]]]) -> List[StoryDescriptor]:
    """
    Validate raw story dicts into StoryDescriptor models.

    Raises:
        InvalidStoryError: If any descriptor is malformed
    """
    parsed = []
    for index, story in enumerate(stories):
        if isinstance(story, StoryDescriptor):
            parsed.append(story)
            continue
        try:
            parsed.append(StoryDescriptor.model_validate(story))
        except ValidationError as e:
            raise InvalidStoryError(f"Story at index {index} is invalid: {e}") from e
    return parsed


class GraphBuilder:
    """Loads story descriptors into a GraphStore."""

    def __init__(self, store: GraphStore):
        self.store = store

    def find_undeclared(self, stories: List[StoryDescriptor]) -> Dict[StoryId, List[StoryId]]:
        """Map each story to the dependency ids that no story declares."""
        declared = {story.id for story in stories}
        missing: Dict[StoryId, List[StoryId]] = {}
        for story in stories:
            unknown = [dep for dep in story.dependencies if dep not in declared]
            if unknown:
                missing[story.id] = unknown
        return missing

    def build_from_stories(
        self,
        stories: Iterable[Union[StoryDescriptor, Dict[str, Any]]],
        strict: Optional[bool] = None
    ) -> None:
        """
        Replace the graph contents with the given stories.

        Args:
            stories: Story dicts ({id, dependencies, priority, metadata, ...})
                or StoryDescriptor models
            strict: Reject undeclared dependency ids instead of creating
                placeholder nodes (defaults to the store's config)

        Raises:
            InvalidStoryError: If a descriptor is malformed
            UndeclaredDependencyError: In strict mode, if a dependency id is
                not declared as a story

        Both errors are raised before the existing graph is cleared.
        """
        parsed = parse_stories(stories)
        strict = self.store.config.strict_dependencies if strict is None else strict

        missing = self.find_undeclared(parsed)
        if missing and strict:
            logger.error(f"Rejecting stories with undeclared dependencies: {missing}")
            raise UndeclaredDependencyError(missing)

        self.store.clear()

        # Pass 1: every declared story exists before any edge is wired
        default_priority = self.store.config.default_priority
        for story in parsed:
            if self.store.has_node(story.id):
                logger.warning(f"Duplicate story id {story.id}, keeping first declaration")
                continue
            self.store.add_node(story.id, story.node_metadata(default_priority))

        # Pass 2: dependency edges (undeclared ids become placeholder nodes)
        for story in parsed:
            for dep in story.dependencies:
                self.store.add_dependency(story.id, dep)

        if missing:
            placeholders = sorted({dep for deps in missing.values() for dep in deps}, key=tiebreak_key)
            logger.warning(f"Created placeholder nodes for undeclared dependencies: {placeholders}")

        logger.info(
            f"Dependency graph built from {len(parsed)} stories: "
            f"{len(self.store)} nodes, {self.store.edge_count()} edges"
        )

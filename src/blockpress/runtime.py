"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.idgen import CounterId
from .adapters.structured import StructuredBlockCodec
from .adapters.tagged_text import TaggedTextCodec
from .adapters.yaml_codec import BlogDraftCodec, GuideDraftCodec, YamlFrontmatter
from .authoring import BlogAuthoringSession, GuideAuthoringSession
from .config import BlockpressConfig, load_config


@dataclass
class Runtime:
    """Container for all wired components."""
    config: BlockpressConfig
    idgen: CounterId
    tagged: TaggedTextCodec
    structured: StructuredBlockCodec
    blog_drafts: BlogDraftCodec
    guide_drafts: GuideDraftCodec

    def new_blog_session(self) -> BlogAuthoringSession:
        return BlogAuthoringSession(self.tagged, self.config.validation)

    def new_guide_session(self) -> GuideAuthoringSession:
        return GuideAuthoringSession(self.structured, self.config.validation)


def build_runtime(
    config_path: Path | None = None,
    config: BlockpressConfig | None = None,
) -> Runtime:
    """Build and wire all components."""
    if config is None:
        config = load_config(config_path=config_path)

    # one counter for both codecs keeps client ids unique across the process
    idgen = CounterId(prefix=config.ids.prefix)

    return Runtime(
        config=config,
        idgen=idgen,
        tagged=TaggedTextCodec(idgen),
        structured=StructuredBlockCodec(idgen),
        blog_drafts=BlogDraftCodec(YamlFrontmatter()),
        guide_drafts=GuideDraftCodec(),
    )

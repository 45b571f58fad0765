"""
Skill discovery and resolution.

Skills are directories containing a SKILL.md marker file. Roots are
searched in rank order (lower rank first):
1. ~/.config/skillbook/skills/ - personal skills (alias ``user``)
2. Additional roots from configuration
3. The bundled library (alias ``superpowers``)

A personal skill shadows a library skill of the same name unless the
library one is requested explicitly as ``superpowers:<name>``.
"""

from skillbook.skills.discovery import (
    DiscoveryResult,
    DuplicateSkillError,
    discover_skills,
    find_skills_in_dir,
)
from skillbook.skills.frontmatter import (
    Frontmatter,
    extract_frontmatter,
    split_frontmatter,
    strip_frontmatter,
)
from skillbook.skills.index import SkillIndex
from skillbook.skills.loader import (
    list_supporting_files,
    load_body,
    read_supporting_file,
    render_injection,
)
from skillbook.skills.preprocessor import (
    SkillPreprocessResult,
    format_skill_injection_message,
    preprocess_for_skills,
)
from skillbook.skills.registry import SkillRegistry
from skillbook.skills.resolver import (
    AmbiguousQualifierError,
    ResolutionRequest,
    SkillResolver,
    parse_skill_reference,
    resolve_skill,
    resolve_skill_path,
)
from skillbook.skills.skill import (
    SkillRecord,
    SkillRoot,
    load_skill_record,
    order_roots,
)

__all__ = [
    # Core
    "SkillRoot",
    "SkillRecord",
    "load_skill_record",
    "order_roots",
    # Parsing
    "Frontmatter",
    "extract_frontmatter",
    "strip_frontmatter",
    "split_frontmatter",
    # Discovery
    "DiscoveryResult",
    "DuplicateSkillError",
    "discover_skills",
    "find_skills_in_dir",
    # Resolution
    "SkillIndex",
    "SkillResolver",
    "ResolutionRequest",
    "AmbiguousQualifierError",
    "parse_skill_reference",
    "resolve_skill",
    "resolve_skill_path",
    # Loading and registry
    "load_body",
    "render_injection",
    "list_supporting_files",
    "read_supporting_file",
    "SkillRegistry",
    # Message preprocessing
    "SkillPreprocessResult",
    "preprocess_for_skills",
    "format_skill_injection_message",
]

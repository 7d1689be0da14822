"""
Skills - one capability each for Photo Poet.

Each skill is a directory containing:
- SKILL.md: Metadata with YAML frontmatter + notes
- skill_name.py: Implementation (builds the prompt, calls the client)

Skills never catch remote failures; the action layer classifies them.
"""

import logging
from pathlib import Path
from typing import Optional

# Skill directories
SKILLS_DIR = Path(__file__).parent

logger = logging.getLogger(__name__)

# Import skills from subdirectories (understand_image before generate_image)
from .understand_image.understand_image import ImageUnderstanding, StyleAnalysis
from .generate_poem.generate_poem import PoemGenerator, PoemOutput
from .customize_poem.customize_poem import PoemReviser, RevisionOutput
from .generate_image.generate_image import ImageGenerator
from .generate_tts.generate_tts import TTSGenerator, TTSResult
from .test_voice.test_voice import VoiceProbe
from .generate_video.generate_video import VideoGenerator, VideoClipResult
from .generate_video.operation_poller import OperationPoller

__all__ = [
    "ImageUnderstanding",
    "StyleAnalysis",
    "PoemGenerator",
    "PoemOutput",
    "PoemReviser",
    "RevisionOutput",
    "ImageGenerator",
    "TTSGenerator",
    "TTSResult",
    "VoiceProbe",
    "VideoGenerator",
    "VideoClipResult",
    "OperationPoller",
    "SKILLS_DIR",
]


def _read_frontmatter(skill_md: Path) -> Optional[dict]:
    """Parse the YAML block between the leading '---' markers, if any."""
    import yaml

    content = skill_md.read_text(encoding="utf-8")
    if not content.startswith("---"):
        return None
    end = content.find("---", 3)
    if end < 0:
        return None
    try:
        metadata = yaml.safe_load(content[3:end].strip())
    except yaml.YAMLError as e:
        logger.warning(f"[Skills] Bad frontmatter in {skill_md}: {e}")
        return None
    return metadata if isinstance(metadata, dict) else None


def list_skills() -> list[dict]:
    """
    List all available skills with their metadata.

    Returns list of dicts with name, description, triggers, keywords, path.
    """
    skills = []
    for skill_dir in sorted(SKILLS_DIR.iterdir()):
        if not skill_dir.is_dir() or skill_dir.name.startswith("_"):
            continue
        skill_md = skill_dir / "SKILL.md"
        if not skill_md.exists():
            continue
        metadata = _read_frontmatter(skill_md)
        if metadata is None:
            continue
        skills.append({
            "name": metadata.get("name", skill_dir.name),
            "description": metadata.get("description", ""),
            "triggers": metadata.get("triggers", []),
            "keywords": metadata.get("keywords", []),
            "path": str(skill_dir),
        })
    return skills


def get_skill_context() -> str:
    """
    Summarize the skills as a markdown list (name + description).
    """
    skills = list_skills()
    lines = ["## Available Skills\n"]
    for skill in skills:
        lines.append(f"- **{skill['name']}**: {skill['description']}")
    return "\n".join(lines)

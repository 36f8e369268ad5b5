"""
Campaign orchestrator

Runs the single-creative pipeline over every variation of a campaign,
one at a time, and writes the manifest at the end.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from adreel.core import create_campaign_dirs, get_logger, set_campaign_context

from .manifest import CampaignManifest, write_variant_error
from .pipeline import CreativePipeline
from .results import Variation

logger = get_logger(__name__, component="campaign")


@dataclass
class CampaignSpec:
    name: str
    template_id: str
    base_creative_data: Dict[str, Any] = field(default_factory=dict)
    voiceover_scripts: Optional[Sequence[str]] = None
    variations: Optional[Sequence[Variation]] = None


def build_variations(spec: CampaignSpec) -> List[Variation]:
    """Effective variation list.

    Explicit variations win; otherwise one variation per script, each with its
    own copy of the base data; otherwise a single script-less variation.
    """
    if spec.variations:
        return list(spec.variations)
    if spec.voiceover_scripts:
        return [
            Variation(creative_data=dict(spec.base_creative_data), voiceover_script=script)
            for script in spec.voiceover_scripts
        ]
    return [Variation(creative_data=dict(spec.base_creative_data))]


class CampaignOrchestrator:
    def __init__(
        self,
        pipeline: CreativePipeline,
        output_root: Path,
        *,
        variation_delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ):
        self.pipeline = pipeline
        self.output_root = Path(output_root)
        self.variation_delay = variation_delay
        self._sleep = sleep
        self._today = today

    async def run(self, spec: CampaignSpec) -> CampaignManifest:
        dirs = create_campaign_dirs(self.output_root, spec.name, self._today())
        variations = build_variations(spec)
        manifest = CampaignManifest(campaign=spec.name, template_id=spec.template_id, directory=str(dirs.root))

        logger.info(
            "Starting campaign",
            extra={"campaign": spec.name, "template_id": spec.template_id, "variations": len(variations)},
        )

        try:
            for index, variation in enumerate(variations, start=1):
                set_campaign_context(spec.name, index)
                logger.info(f"Variation {index}/{len(variations)}")
                try:
                    result = await self.pipeline.run(
                        spec.template_id,
                        variation.creative_data,
                        variation.voiceover_script,
                        dirs,
                        index,
                    )
                    manifest.add(index, result.to_dict())
                except Exception as exc:
                    logger.error("Variation failed unexpectedly", extra={"error": str(exc)}, exc_info=True)
                    write_variant_error(dirs.errors, index, str(exc))
                    manifest.add(index, {"success": False, "error": str(exc)})

                if index < len(variations) and self.variation_delay > 0:
                    await self._sleep(self.variation_delay)
        finally:
            set_campaign_context(None)

        manifest.write()
        logger.info("Campaign complete", extra={"campaign": spec.name, **manifest.summary})
        return manifest

"""Map job progress onto the steps shown while a track is generated."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from aimusic_studio.core.models.domain import JobStatus

STEP_WINDOW = 15


class StepStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"


class GenerationStep(BaseModel):
    id: str
    title: str
    threshold: int
    status: StepStatus = StepStatus.pending
    progress: float = 0


STEPS = (
    ("credits", "Checking credits", 10),
    ("prompt-enhance", "Enhancing prompt", 25),
    ("lyrics", "Writing lyrics", 40),
    ("style", "Building the style", 60),
    ("music", "Generating music", 80),
    ("processing", "Processing audio", 95),
)


class GenerationStepTracker:
    """Step list driven by job progress.

    A step whose threshold is reached is ``completed``. A step less than
    ``STEP_WINDOW`` points below its threshold is ``processing`` with
    partial progress over that window.

    The ``lyrics`` step only exists for vocal requests that come without
    lyrics, since only those have lyrics written before the music.
    """

    def __init__(self, *, instrumental: bool = False, has_lyrics: bool = False) -> None:
        writes_lyrics = not instrumental and not has_lyrics
        self.steps: List[GenerationStep] = [
            GenerationStep(id=step_id, title=title, threshold=threshold)
            for step_id, title, threshold in STEPS
            if step_id != "lyrics" or writes_lyrics
        ]
        self.current_index = 0

    def update(self, progress: int, status: JobStatus | str = JobStatus.processing) -> List[GenerationStep]:
        status = JobStatus(status)
        for index, step in enumerate(self.steps):
            if progress >= step.threshold:
                step.status, step.progress = StepStatus.completed, 100
                self.current_index = max(self.current_index, index + 1)
            elif progress >= step.threshold - STEP_WINDOW:
                step.status = StepStatus.processing
                step.progress = min((progress - (step.threshold - STEP_WINDOW)) / STEP_WINDOW * 100, 100)
                self.current_index = max(self.current_index, index)

        if status is JobStatus.completed:
            for step in self.steps:
                if step.status is StepStatus.pending:
                    step.status = StepStatus.completed
                step.progress = 100
        elif status is JobStatus.failed and self.current_index < len(self.steps):
            self.steps[self.current_index].status = StepStatus.failed
        return self.steps

    @property
    def current(self) -> Optional[GenerationStep]:
        if self.current_index < len(self.steps):
            return self.steps[self.current_index]
        return None

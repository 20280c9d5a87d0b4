"""Job posting records"""

from dataclasses import dataclass


@dataclass(frozen=True)
class JobContext:
    """What the answer resolver knows about the job being applied to."""

    title: str = ""
    company: str = ""
    description: str = ""


@dataclass(frozen=True)
class JobPosting:
    job_id: str
    title: str = ""
    company: str = ""
    location: str = ""
    easy_apply: bool = True
    already_applied: bool = False
    url: str = ""

    @property
    def view_url(self) -> str:
        return self.url or f"https://www.linkedin.com/jobs/view/{self.job_id}"

    def context(self, description: str = "") -> JobContext:
        return JobContext(title=self.title, company=self.company, description=description)

"""Job search results and job detail page"""

import logging
import re
from urllib.parse import urlencode

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from linkedin_autoapply.data.jobs import JobPosting
from linkedin_autoapply.utils.timing import human_delay

log = logging.getLogger(__name__)

SEARCH_BASE_URL = "https://www.linkedin.com/jobs/search/"
RESULTS_PER_PAGE = 25

DATE_POSTED_FILTERS = {
    "Past 24 hours": "r86400",
    "Past week": "r604800",
    "Past month": "r2592000",
}

EXPERIENCE_LEVEL_FILTERS = {
    "Internship": "1",
    "Entry level": "2",
    "Associate": "3",
    "Mid-Senior level": "4",
    "Director": "5",
    "Executive": "6",
}

JOB_TYPE_FILTERS = {
    "Full-time": "F",
    "Part-time": "P",
    "Contract": "C",
    "Temporary": "T",
    "Internship": "I",
    "Volunteer": "V",
    "Other": "O",
}

WORKPLACE_FILTERS = {
    "On-site": "1",
    "Remote": "2",
    "Hybrid": "3",
}

JOB_LIST_SELECTOR = ".scaffold-layout__list, .jobs-search-results-list"

DESCRIPTION_SELECTORS = [
    ".jobs-description__content",
    ".jobs-box__html-content",
    "#job-details",
    ".jobs-description",
]

EASY_APPLY_SELECTORS = [
    "button.jobs-apply-button",
    'button[aria-label*="Easy Apply"]',
    'button:has-text("Easy Apply")',
]

# Upsell buttons that sit next to Easy Apply
DECOY_WORDS = ("premium", "learning", "upgrade")

WRONG_PAGE_MARKERS = ("/learning/", "/premium/")

JOB_CARDS_SCRIPT = """
() => {
    const clean = (s) => (s || '').replace(/\\s+/g, ' ').trim();
    const cards = document.querySelectorAll('.scaffold-layout__list-item, .jobs-search-results__list-item');
    const easyApplySearch = new URLSearchParams(window.location.search).get('f_AL') === 'true';
    const jobs = [];
    cards.forEach((card) => {
        const link = card.querySelector('a[href*="/jobs/view/"]');
        if (!link) return;
        const href = link.getAttribute('href') || '';
        const match = href.match(/\\/view\\/(\\d+)/);
        if (!match) return;
        const title = card.querySelector('.job-card-list__title, .artdeco-entity-lockup__title, .job-card-container__link');
        const company = card.querySelector('.job-card-container__company-name, .artdeco-entity-lockup__subtitle, .job-card-container__primary-description');
        const location = card.querySelector('.job-card-container__metadata-item, .artdeco-entity-lockup__caption');
        const footer = clean(card.querySelector('.job-card-container__footer-wrapper, .job-card-list__footer-wrapper')?.textContent).toLowerCase();
        jobs.push({
            jobId: match[1],
            title: clean(title?.textContent) || 'Unknown',
            company: clean(company?.textContent) || 'Unknown',
            location: clean(location?.textContent),
            href,
            easyApply: easyApplySearch || footer.includes('easy apply'),
            applied: footer.includes('applied'),
        });
    });
    return jobs;
}
"""


def build_search_url(keyword, page=0, location="", filters=None):
    """LinkedIn job search URL for one keyword and result page"""
    params = {"keywords": keyword}
    if filters is None or filters.easy_apply_only:
        params["f_AL"] = "true"
    params["start"] = str(page * RESULTS_PER_PAGE)
    if location:
        params["location"] = location

    if filters is not None:
        if filters.sort_by == "Most recent":
            params["sortBy"] = "DD"
        if filters.date_posted in DATE_POSTED_FILTERS:
            params["f_TPR"] = DATE_POSTED_FILTERS[filters.date_posted]

        for key, values, mapping in (
            ("f_E", filters.experience_level, EXPERIENCE_LEVEL_FILTERS),
            ("f_JT", filters.job_type, JOB_TYPE_FILTERS),
            ("f_WT", filters.on_site, WORKPLACE_FILTERS),
        ):
            codes = [mapping[v] for v in values if v in mapping]
            if codes:
                params[key] = ",".join(codes)

    return f"{SEARCH_BASE_URL}?{urlencode(params)}"


def is_decoy_button(text, aria_label=""):
    combined = f"{text} {aria_label}".lower()
    return any(word in combined for word in DECOY_WORDS)


def landed_on_wrong_page(url):
    return any(marker in (url or "") for marker in WRONG_PAGE_MARKERS)


class JobPage:
    def __init__(self, page, settings, timing=None):
        self.page = page
        self.settings = settings
        self.timing = timing or {}

    # -- search -------------------------------------------------------------

    def search(self, keyword, page_number=0, attempts=3):
        url = build_search_url(keyword, page_number, self.settings.search.location, self.settings.filters)
        log.info("Searching for %r jobs (page %d)", keyword, page_number + 1)

        for attempt in range(1, attempts + 1):
            try:
                self.page.goto(url, wait_until="domcontentloaded", timeout=45000)
                human_delay(2000, 3000)
                try:
                    self.page.wait_for_selector(JOB_LIST_SELECTOR, timeout=20000)
                except PlaywrightTimeoutError:
                    log.warning("Job list selector not found")
                return True
            except PlaywrightError as e:
                log.warning("Search attempt %d/%d failed: %s", attempt, attempts, e)
                if attempt < attempts:
                    human_delay(5000, 8000)
        return False

    def job_cards(self):
        self.page.mouse.wheel(0, 500)
        human_delay(1000, 2000)
        raw = self.page.evaluate(JOB_CARDS_SCRIPT) or []
        return [
            JobPosting(
                job_id=item["jobId"],
                title=item.get("title", ""),
                company=item.get("company", ""),
                location=item.get("location", ""),
                easy_apply=bool(item.get("easyApply")),
                already_applied=bool(item.get("applied")),
                url=f"https://www.linkedin.com/jobs/view/{item['jobId']}",
            )
            for item in raw
        ]

    # -- job detail ---------------------------------------------------------

    def open(self, job):
        """Navigate to the job view page; False if we ended up elsewhere"""
        log.info("Navigating to: %s", job.view_url)
        self.page.goto(job.view_url, wait_until="domcontentloaded", timeout=30000)
        try:
            self.page.wait_for_load_state("networkidle", timeout=10000)
        except PlaywrightTimeoutError:
            pass
        human_delay(2000, 4000)

        if "/jobs/" not in self.page.url:
            log.warning("Navigation went wrong! Current URL: %s", self.page.url)
            return False
        return True

    def description(self):
        for selector in DESCRIPTION_SELECTORS:
            element = self.page.locator(selector)
            if element.count() > 0:
                text = element.first.inner_text().strip()
                if text:
                    return re.sub(r"\s+", " ", text)
        return ""

    def is_already_applied(self):
        """
        Pre-flight check on the job page: has this job already been applied to?

        Returns: (bool, str) - (is_applied, reason)
        """
        # 1. Primary apply button state
        primary = self.page.locator(", ".join(EASY_APPLY_SELECTORS)).first
        if primary.count() > 0:
            text = primary.inner_text().strip()
            if text == "Applied":
                return (True, "button_exact_text: Applied")
            if "View application" in text:
                return (True, "button_text: View application")

        # 2. Explicit application status badges
        status_indicators = [
            '.artdeco-inline-feedback:has-text("Applied")',
            '[data-test-job-apply-state="APPLIED"]',
            '.jobs-s-apply__application-link',
        ]
        for indicator in status_indicators:
            if self.page.locator(indicator).count() > 0:
                return (True, f"status_badge: {indicator}")

        # Uncertain: proceed, never block a valid application
        return (False, "")

    def click_easy_apply(self):
        """Click the real Easy Apply button, skipping upsell decoys"""
        for selector in EASY_APPLY_SELECTORS:
            buttons = self.page.locator(selector)
            for i in range(buttons.count()):
                button = buttons.nth(i)
                if not button.is_visible():
                    continue
                text = button.inner_text().strip()
                aria = button.get_attribute("aria-label") or ""
                if is_decoy_button(text, aria):
                    continue
                if "easy apply" not in f"{text} {aria}".lower():
                    continue
                log.info("Clicking button: %r (%s)", text, aria)
                button.click()
                human_delay(2000, 3000)
                return True
        return False

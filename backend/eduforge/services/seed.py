"""Default service catalog and system settings.

Seeding is idempotent: existing slugs and keys are left untouched.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from ..database import SessionLocal

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = [
    {
        "name": "Essay Writing",
        "slug": "essay-writing",
        "description": "Professional essay writing assistance for all academic levels",
        "long_description": (
            "Our expert writers provide comprehensive essay writing services, including "
            "research papers, argumentative essays, descriptive essays, and more. We ensure "
            "originality, proper formatting, and adherence to academic standards."
        ),
        "ideal_use_case": "Research papers, argumentative essays, academic papers",
        "estimated_turnaround": "3-7 days",
        "pricing_note": "Price depends on word count and complexity",
    },
    {
        "name": "Research Paper Assistance",
        "slug": "research-paper-assistance",
        "description": "Complete research paper support from topic selection to final draft",
        "long_description": (
            "We offer end-to-end research paper assistance including topic development, "
            "literature review, methodology, data analysis, and final writing. Perfect for "
            "thesis, dissertations, and academic publications."
        ),
        "ideal_use_case": "Thesis, dissertations, academic publications",
        "estimated_turnaround": "1-4 weeks",
        "pricing_note": "Custom pricing based on complexity",
    },
    {
        "name": "Assignment Help",
        "slug": "assignment-help",
        "description": "Assistance with various types of academic assignments",
        "long_description": (
            "Get expert help with homework assignments, case studies, lab reports, book "
            "reviews, and other academic tasks. We provide detailed solutions with "
            "explanations to help you learn."
        ),
        "ideal_use_case": "Homework, case studies, lab reports",
        "estimated_turnaround": "1-3 days",
        "pricing_note": "Fixed pricing based on assignment type",
    },
    {
        "name": "Dissertation Writing",
        "slug": "dissertation-writing",
        "description": "Comprehensive dissertation and thesis writing services",
        "long_description": (
            "Our dissertation services cover proposal development, literature review, "
            "research methodology, data collection and analysis, and complete dissertation "
            "writing. We work with you through every chapter."
        ),
        "ideal_use_case": "PhD and Master's dissertations",
        "estimated_turnaround": "2-6 months",
        "pricing_note": "Custom pricing for long-term projects",
    },
    {
        "name": "Editing & Proofreading",
        "slug": "editing-proofreading",
        "description": "Professional editing and proofreading for academic papers",
        "long_description": (
            "Our expert editors review your work for grammar, spelling, punctuation, "
            "clarity, and academic tone. We also check for consistency, flow, and adherence "
            "to formatting guidelines."
        ),
        "ideal_use_case": "Improving existing papers, final review",
        "estimated_turnaround": "1-3 days",
        "pricing_note": "Price based on word count",
    },
    {
        "name": "Presentation Creation",
        "slug": "presentation-creation",
        "description": "Professional presentation slides and speaker notes",
        "long_description": (
            "We create engaging, professional presentation slides with clear visuals, "
            "proper formatting, and comprehensive speaker notes. Perfect for class "
            "presentations, conferences, and thesis defenses."
        ),
        "ideal_use_case": "Class presentations, conference slides",
        "estimated_turnaround": "1-2 days",
        "pricing_note": "Fixed pricing based on slide count",
    },
    {
        "name": "Data Analysis",
        "slug": "data-analysis",
        "description": "Statistical analysis and data interpretation services",
        "long_description": (
            "Our statisticians help with quantitative and qualitative data analysis using "
            "various statistical tools and software. We provide comprehensive reports with "
            "visualizations and interpretations."
        ),
        "ideal_use_case": "Research projects, thesis analysis",
        "estimated_turnaround": "3-7 days",
        "pricing_note": "Custom pricing based on analysis complexity",
    },
    {
        "name": "Case Study Writing",
        "slug": "case-study-writing",
        "description": "Professional case study writing and analysis",
        "long_description": (
            "We write detailed case studies following proper academic structure including "
            "introduction, problem statement, analysis, solutions, and conclusions. Perfect "
            "for business, medical, and academic case studies."
        ),
        "ideal_use_case": "Business, medical, and academic case studies",
        "estimated_turnaround": "2-5 days",
        "pricing_note": "Price depends on case complexity",
    },
]

DEFAULT_SETTINGS = [
    {"key": "platform_name", "value": "Eduforge", "category": "general"},
    {
        "key": "payment_instructions",
        "value": (
            "Please transfer payment to the following bank account:\n\n"
            "Bank Name: ABC Bank\nAccount Name: Eduforge Services\n"
            "Account Number: 123456789\n\n"
            "After payment, upload your receipt and enter the reference number."
        ),
        "category": "payment",
    },
    {"key": "max_file_size_mb", "value": "10", "category": "files"},
    {"key": "allowed_file_types", "value": "pdf,doc,docx,zip,mp3,wav", "category": "files"},
]


def seed_defaults(session: Optional[Session] = None) -> int:
    """Insert missing default services and settings; returns rows added."""
    owns_session = session is None
    session = session or SessionLocal()
    added = 0
    try:
        existing_slugs = {s for (s,) in session.query(models.Service.slug).all()}
        for order, svc in enumerate(DEFAULT_SERVICES):
            if svc["slug"] in existing_slugs:
                continue
            session.add(models.Service(sort_order=order, **svc))
            added += 1
        existing_keys = {k for (k,) in session.query(models.SystemSetting.key).all()}
        for row in DEFAULT_SETTINGS:
            if row["key"] in existing_keys:
                continue
            session.add(models.SystemSetting(**row))
            added += 1
        session.commit()
        if added:
            logger.info("Seeded %d default services/settings", added)
        return added
    except Exception:
        session.rollback()
        raise
    finally:
        if owns_session:
            session.close()

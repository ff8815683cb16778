# entyre_cms/seed_data.py
"""Default home page sections loaded by ``flask seed-sections``."""

HOME_SECTIONS = [
    {
        "sectionIndex": 1,
        "title": "Welcome to ENTYRE",
        "type": "text",
        "content": (
            "# Transforming End-of-Life Tyres into Valuable Resources\n\n"
            "The ENTYRE platform brings together research on End-of-Life Tyre (ELT) "
            "valorisation pathways in Ireland: recycling technologies, economic "
            "viability, environmental impact and policy.\n\n"
            "Explore the interactive tools, research findings and pathway analysis "
            "to see how waste tyres can become a resource."
        ),
    },
    {
        "sectionIndex": 2,
        "title": "Research Methodology & Approach",
        "type": "text",
        "content": (
            "## Our Research Approach\n\n"
            "### Technical Analysis\n"
            "- Life Cycle Assessment of valorisation pathways\n"
            "- Techno-economic feasibility studies\n\n"
            "### Stakeholder Engagement\n"
            "- Industry consultation\n"
            "- Policy maker engagement\n"
        ),
    },
    {
        "sectionIndex": 3,
        "title": "Key Statistics & Impact",
        "type": "key-value",
        "content": {
            "Annual ELT Generation": "55,000 tonnes in Ireland",
            "Project Duration": "2022-2025",
            "Valorisation Pathways": "7+ processing routes examined",
            "Technology Readiness": "Pathways at TRL 4-8",
        },
    },
    {
        "sectionIndex": 4,
        "title": "Project Partners & Collaboration",
        "type": "text",
        "content": (
            "## Project Consortium\n\n"
            "**MaREI Centre, University College Cork** leads the project together "
            "with industry collaborators, academic partners and government agencies."
        ),
    },
]

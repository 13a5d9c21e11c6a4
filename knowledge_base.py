# 1. STATIC PLAYBOOK DATA (copy for action cards and the PDF)
# Kept hardcoded so the cards and report bullets always read clean and marketing-ready.
# Keyed by the leak category used in calculator.BREAKDOWN_CATEGORIES.
ACTION_PLAYBOOK = {
    "leadResponse": {
        "id": "lead-response",
        "title": "Accelerate Lead Response Time",
        "description": "Implement automated lead routing and instant response systems",
        "effort": "Medium",
        "complexity": "Medium",
        "timeframe": "4-6 weeks",
        "payback_period": "2-3 months",
        "why_it_matters": "Faster lead response dramatically increases conversion rates. Every hour of delay reduces conversion probability by 10%.",
        "dependencies": ["CRM integration", "Sales team training"],
        "steps": [
            "Set up automated lead routing",
            "Create instant response templates",
            "Train sales team on new process",
            "Monitor response time metrics",
        ],
    },
    "selfServe": {
        "id": "selfserve-optimization",
        "title": "Optimize Self-Serve Experience",
        "description": "Improve onboarding flow and reduce friction points",
        "effort": "High",
        "complexity": "High",
        "timeframe": "8-12 weeks",
        "payback_period": "4-6 months",
        "why_it_matters": "Self-serve optimization reduces customer acquisition costs and improves user experience, leading to higher conversion rates.",
        "dependencies": ["UX/UI team", "Product development", "User research"],
        "steps": [
            "Conduct user journey analysis",
            "Identify friction points in onboarding",
            "Design improved user flows",
            "A/B test new experience",
            "Roll out optimized flow",
        ],
    },
    "processInefficiency": {
        "id": "process-automation",
        "title": "Automate Manual Processes",
        "description": "Eliminate repetitive tasks and streamline workflows",
        "effort": "Low",
        "complexity": "Low",
        "timeframe": "2-4 weeks",
        "payback_period": "1-2 months",
        "why_it_matters": "Automation reduces operational costs, eliminates human error, and frees up team capacity for strategic work.",
        "dependencies": ["Operations team", "Technical resources"],
        "steps": [
            "Map current manual processes",
            "Identify automation opportunities",
            "Implement workflow automation",
            "Train team on new processes",
            "Monitor efficiency gains",
        ],
    },
    "failedPayments": {
        "id": "payment-recovery",
        "title": "Improve Payment Recovery",
        "description": "Implement dunning management and payment retry logic",
        "effort": "Low",
        "complexity": "Low",
        "timeframe": "1-2 weeks",
        "payback_period": "1 month",
        "why_it_matters": "Failed payment recovery directly impacts revenue retention and reduces involuntary churn.",
        "dependencies": ["Payment processor integration", "Customer success team"],
        "steps": [
            "Set up automated dunning sequences",
            "Implement smart retry logic",
            "Create customer communication templates",
            "Monitor recovery rates",
            "Optimize based on performance",
        ],
    },
}

# 2. URGENCY DISPLAY CONFIG (label + RGB used by the PDF)
URGENCY_STYLES = {
    "Critical": {"label": "Critical", "color": (185, 28, 28)},
    "High": {"label": "High Priority", "color": (234, 88, 12)},
    "Medium": {"label": "Medium Priority", "color": (202, 138, 4)},
    "Low": {"label": "Low Priority", "color": (22, 163, 74)},
}

PERFORMANCE_LABELS = {
    "best-in-class": "Best-in-Class",
    "above-average": "Above Average",
    "average": "Industry Average",
    "below-average": "Growth Opportunity",
}

"""Wording pools for grade feedback and advisories.

Each pool holds interchangeable phrasings of the same message. The composer
picks one per call with an injectable random source, so only the wording
varies; which advisories appear, and in what order, never does.
Placeholders use str.format names.
"""

from __future__ import annotations

from typing import Dict, Tuple

from pcfinder.models.build import Grade

# ──────────────────────────────────────────────
# Grade Feedback
# ──────────────────────────────────────────────

GRADE_FEEDBACK: Dict[Grade, Tuple[str, ...]] = {
    Grade.A: (
        "Excellent pairing. Every part is pulling its weight and nothing is holding the rest back.",
        "This is a properly balanced machine. The graphics card and processor sit in the same tier.",
        "Top marks. You would struggle to find a better use of this budget.",
        "A textbook build: strong components that complement each other rather than compete.",
        "Very well judged. This system will stay comfortable for years of upgrades and updates.",
    ),
    Grade.B: (
        "A strong build with only minor compromises. Most users will never notice them.",
        "Well balanced overall. A small tweak or two would push this into the top tier.",
        "Solid choices throughout. The weak spots are small and easy to address later.",
        "Good harmony between the core parts, with a little headroom left on the table.",
        "This will perform nicely. There is a modest imbalance worth knowing about below.",
    ),
    Grade.C: (
        "A workable build, but one or two parts are out of step with the rest.",
        "Decent foundations. Some money is sitting in the wrong place, though.",
        "It will do the job. Rebalancing a little would get noticeably more out of it.",
        "Acceptable, with clear room to improve how the budget is spread.",
        "The pieces work together, just not as efficiently as they could.",
    ),
    Grade.D: (
        "There are noticeable mismatches here that will cost you performance.",
        "This build leans too hard on one component while others lag behind.",
        "Several parts are pulling in different directions. Worth a rethink before buying.",
        "Below par on balance. The advice below should recover a fair amount.",
        "Some of this budget is being wasted on parts the rest of the system cannot use.",
    ),
    Grade.E: (
        "Significant imbalances. Parts of this system will sit idle waiting on others.",
        "This combination is likely to disappoint for its price. Consider the changes below.",
        "Weak synergy overall. A different split of the budget would serve you far better.",
        "Several serious bottlenecks. We would not recommend this configuration as it stands.",
        "The components clash more than they cooperate. Please review the suggestions.",
    ),
    Grade.F: (
        "This configuration has fundamental problems and needs reworking.",
        "Major mismatches throughout. We strongly suggest starting again from the core parts.",
        "As selected, these parts will not give you a sensible system.",
        "Poor synergy on almost every axis. The advice below is a starting point, not a polish.",
        "This build needs substantial changes before it is worth ordering.",
    ),
}


# ──────────────────────────────────────────────
# Advisories
# ──────────────────────────────────────────────

STORAGE_HDD: Tuple[str, ...] = (
    "Critical: there is no SSD in this build. Booting and loading from a hard drive will feel painfully slow. Add an NVMe drive for the operating system.",
    "Critical: a hard drive as primary storage is the biggest slowdown here. Even a small NVMe SSD for the system will transform responsiveness.",
)

STORAGE_SATA: Tuple[str, ...] = (
    "Storage upgrade priority: move from SATA to an NVMe SSD. Load times and file transfers improve several-fold for a small price difference.",
    "Consider an NVMe SSD instead of SATA. The price gap is small and the speed gain is large.",
)

CPU_BOTTLENECK: Tuple[str, ...] = (
    "CPU bottleneck: {cores} cores will hold back this graphics card. Step up to at least 8 cores to let the GPU stretch its legs.",
    "The processor is the limiting factor. With only {cores} cores the GPU will wait on it in CPU-heavy games. An 8-core chip fixes this.",
)

GPU_BOTTLENECK: Tuple[str, ...] = (
    "GPU bottleneck: {vram}GB of video memory is short for this processor. A card with at least 8GB will make far better use of the CPU.",
    "The graphics card is underpowered next to the CPU. Moving from {vram}GB to 8GB or more would rebalance the system.",
)

REALLOCATION_INTRO: Dict[str, Tuple[str, ...]] = {
    "acceptable": (
        "Your build is acceptable but has room for optimisation.",
        "This build is reasonable, though the budget could work harder.",
    ),
    "improve": (
        "To improve your build's balance,",
        "To even out the weak spots,",
    ),
}

REALLOCATION_TIP = "Budget reallocation tip: {intro} If your budget is fixed, downgrade your {strategy}."

REALLOCATION_STRATEGIES: Dict[str, str] = {
    "content-creation": (
        "GPU to a mid-tier card and put the savings into 64GB of RAM or a faster NVMe SSD. "
        "Editing and rendering gain more from memory and storage speed than from raw GPU power"
    ),
    "streaming": (
        "CPU slightly and invest in a GPU with a modern hardware encoder. "
        "The card then handles encoding and the processor can drop a tier without hurting stream quality"
    ),
    "gaming-flagship": (
        "GPU from flagship to upper mid-tier and reinvest in a faster CPU or a high refresh-rate monitor. "
        "The gap between the two narrows at high settings"
    ),
    "gaming": (
        "case and lighting budget and prioritise a GPU upgrade. Frame rates matter more than RGB in a gaming build"
    ),
    "gaming-budget": (
        "lighting and extras and put everything into GPU video memory. "
        "An extra 2-4GB of VRAM noticeably extends the useful life of the build"
    ),
    "general": (
        "extras such as RGB and tempered glass and focus on SSD capacity and RAM. "
        "Those pay off every day long after the looks stop mattering"
    ),
}

LOW_RAM_SPEED: Tuple[str, ...] = (
    "Memory speed: {speed}MHz RAM is on the slow side. A 3200MHz or faster kit is usually only a few pounds more.",
    "Your RAM runs at {speed}MHz. Moving to 3200MHz or above gives a measurable boost, especially on AMD platforms.",
)

DIMINISHING_RETURNS: Tuple[str, ...] = (
    "Value check: at this price the last few hundred pounds buy relatively little extra performance. Make sure the flagship GPU is truly needed.",
    "You are well into diminishing returns. Stepping the GPU down one tier would save a lot for a small performance loss.",
)

SWEET_SPOT: Tuple[str, ...] = (
    "Great value: this build sits right in the price-to-performance sweet spot.",
    "You have landed in the best-value price bracket. Money here goes furthest.",
)

STRETCH_BUDGET: Tuple[str, ...] = (
    "Budget note: stretching the budget by £100-£200 would unlock a much better balanced system.",
    "At this price the compromises add up. A modest increase would lift the whole build a tier.",
)

LAUNCH_SEASON: Tuple[str, ...] = (
    "Timing: new hardware generations usually launch early in the year. Waiting a few weeks could bring better parts or lower prices.",
    "It is launch season for new components. If you can wait, prices on the current generation often drop shortly.",
)

SALE_SEASON: Tuple[str, ...] = (
    "Timing: November sales are on. Keep an eye out for discounts on the major components.",
    "Sale season is here. Prices on GPUs and SSDs are often at their lowest this month.",
)

BACK_TO_SCHOOL: Tuple[str, ...] = (
    "Timing: back-to-school offers often include bundles on CPUs and motherboards. Worth a look.",
    "August often brings student and back-to-school deals. Check for bundle pricing before you buy.",
)

CONFIDENCE_BOOSTER: Tuple[str, ...] = (
    "You can order this build with confidence.",
    "This is a configuration we are happy to stand behind.",
    "Everything here is well matched. Enjoy the new machine.",
)

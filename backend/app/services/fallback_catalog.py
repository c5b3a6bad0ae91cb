"""
Embedded fallback catalog.

Served when neither a remote catalog URL nor a local catalog file can be
loaded. It covers one or more products per pricing archetype, not the full
range, and omits marketing metadata.
"""
from typing import Any, Dict

_STANDARD_SLIDING_RATES: Dict[str, Any] = {
    "baseRate": 750,
    "hardwareCost": 2200,
    "useGlobalRates": True,
    "glass": {},
    "coating": {},
    "lock": {},
    "mesh": {"standard": 120},
}

_CASEMENT_RATES: Dict[str, Any] = {
    "hardwareCost": 650,
    "hardwareCostMultiPoint": 1400,
    "useGlobalRates": True,
    "glass": {"6mm": 0, "8mm": 0, "10mm": 0, "12mm": 0, "dgu": 0, "laminated": 0},
    "grill": {"aluminium12mm": 280},
    "mesh": {"openable": 350},
    "lock": {"singlePoint": 0, "multiPoint": 0},
}

_ENTRANCE_RATES: Dict[str, Any] = {
    "hardwareCost": 1800,
    "hardwareCostMultiPoint": 2200,
    "useGlobalRates": True,
    "glass": {"8mm": 0, "10mm": 0, "12mm": 0, "dgu": 0, "safety": 0},
    "coating": {"texture": 0, "smooth": 0, "wooden": 0},
    "lock": {"singlePoint": 0, "multiPoint": 0, "mortice": 0},
    "mesh": {"security": 280},
}

_LOUVER_COMMON: Dict[str, Any] = {
    "useGlobalRates": False,
    "profileLengths": [12, 16],
    "aluminiumRatePerKg": 330,
    "coatingRatePerFt": 50,
}

_PREMIUM_COLORS: Dict[str, float] = {"rose-gold": 65, "copper-gold": 65}


FALLBACK_CATALOG: Dict[str, Any] = {
    "globalRates": {
        "glass": {
            "6mm": 0,
            "8mm": 30,
            "10mm": 50,
            "12mm": 80,
            "dgu": 180,
            "laminated": 220,
            "safety": 220,
        },
        "coating": {"wooden": 65},
        "lock": {"singlePoint": 0, "multiPoint": 1200, "mortice": 1500},
        "mesh": {"standard": 120, "openable": 350},
        "grill": {"aluminium12mm": 280},
    },
    "products": [
        # ── Windows & doors ───────────────────────────────────────────────
        {
            "id": "29mm-sliding",
            "name": "29mm Sliding Series Aluminium Window",
            "slug": "29mm-sliding-window",
            "category": "aluminium-windows",
            "subcategory": "sliding",
            "status": "active",
            "rates": dict(_STANDARD_SLIDING_RATES),
            "features": ["mesh"],
            "description": "29mm series sections with 1.2mm wall thickness and slim interlock.",
        },
        {
            "id": "2track-french",
            "name": "2 Track French Sliding Door",
            "slug": "2-track-french-sliding-door",
            "category": "aluminium-windows",
            "subcategory": "sliding",
            "status": "active",
            "rates": dict(_STANDARD_SLIDING_RATES),
            "features": ["mesh", "morticeLock", "topFixed"],
            "description": "2 track 4 door system, side doors fixed, middle doors sliding.",
        },
        {
            "id": "3track-sliding",
            "name": "3 Track Sliding Window (27MM Domal Series)",
            "slug": "3-track-sliding-window",
            "category": "aluminium-windows",
            "subcategory": "sliding",
            "status": "active",
            "rates": {
                "baseRate": 500,
                "hardwareCost": 800,
                "mesh": 100,
                "glass": {"6mm": 15, "8mm": 30},
                "trackOptions": {"2track": 0, "3track": 100},
            },
            "features": ["trackSelection", "heightValidation", "colorOptions"],
            "description": "2 track (without mesh) or 3 track (with mesh). Includes 5mm clear glass.",
        },
        {
            "id": "top-hung-casement",
            "name": "Top Hung Casement Window",
            "slug": "top-hung-casement-window",
            "category": "aluminium-windows",
            "subcategory": "casement",
            "status": "active",
            "rates": {"baseRate": 650, **_CASEMENT_RATES},
            "features": ["mesh", "grill", "multiPointLock"],
            "description": "40mm casement profile with 6mm clear toughened glass and friction stay.",
        },
        {
            "id": "georgian-bar-openable",
            "name": "Georgian Bar Openable Window",
            "slug": "georgian-grill-casement-door",
            "category": "aluminium-windows",
            "subcategory": "casement",
            "status": "active",
            "rates": {"baseRate": 900, **_CASEMENT_RATES},
            "features": ["mesh", "grill", "multiPointLock"],
            "description": "40mm casement profile with golden Georgian bar design.",
        },
        {
            "id": "french-georgian-bar",
            "name": "French Aluminium Door with Georgian Bar",
            "slug": "french-door-georgian-bar",
            "category": "aluminium-windows",
            "subcategory": "french-door",
            "status": "active",
            "rates": {"baseRate": 950, **_ENTRANCE_RATES},
            "features": ["mesh", "multiPointLock", "morticeLock", "heightValidation"],
            "maxHeight": 9,
            "description": "35mm slim profile French door. 8mm toughened glass in base rate.",
        },
        {
            "id": "slim-entrance-glass-door",
            "name": "Luxury Slim Entrance Glass Door",
            "slug": "slim-entrance-glass-door",
            "category": "aluminium-windows",
            "subcategory": "entrance-door",
            "status": "active",
            "rates": {"baseRate": 1250, **_ENTRANCE_RATES},
            "features": [
                "mesh", "multiPointLock", "morticeLock", "heightValidation",
                "coating", "colorOptions",
            ],
            "maxHeight": 10,
            "description": "40mm slim series entrance door. 8mm toughened glass in base rate.",
        },
        {
            "id": "full-elevation-villa-facade",
            "name": "Full Elevation Aluminium Windows & Doors",
            "slug": "full-elevation-villa-facade",
            "category": "aluminium-windows",
            "subcategory": "full-elevation",
            "status": "active",
            "rates": {
                "baseRate": 500,
                "hardwareCost": 0,
                "useGlobalRates": True,
                "glass": {"6mm": 0, "8mm": 0, "10mm": 0, "12mm": 0, "dgu": 0, "safety": 0, "5mm": 0},
                "flutedGlass": {
                    "6mm-clear-fluted": 65,
                    "8mm-clear-fluted": 85,
                    "6mm-brown-fluted": 85,
                    "8mm-brown-fluted": 115,
                    "6mm-grey-fluted": 85,
                    "8mm-grey-fluted": 115,
                },
                "flutedMaxHeights": {"clear": 10, "brown": 8, "grey": 8},
                "premiumColors": dict(_PREMIUM_COLORS),
            },
            "features": ["heightValidation", "colorOptions", "flutedGlass", "premiumColors"],
            "maxHeight": 12,
            "description": "Fixed full-glass elevation with imported slim profiles.",
        },
        # ── Telescopic & folding ──────────────────────────────────────────
        {
            "id": "telescopic-slim-sliding-door",
            "name": "Telescopic Slim Profile Sliding Door",
            "slug": "telescopic-slim-sliding-door",
            "category": "telescope-windows",
            "subcategory": "telescopic",
            "status": "active",
            "rates": {
                "baseRate": 1250,
                "useGlobalRates": False,
                "profiles": {"ultra-slim-12x35": 0, "slim-16x35": 0, "regular-slim-16x45": 0},
                "panelConfig": {"1+1": 4500, "2+1": 6500, "3+1": 9500, "4+1": 12500},
                "glass": {
                    "8mm-clear": 0,
                    "8mm-clear-fluted": 85,
                    "8mm-grey-fluted": 115,
                    "8mm-brown-fluted": 115,
                },
                "premiumColors": dict(_PREMIUM_COLORS),
            },
            "features": ["panelConfig", "profileOptions", "colorOptions", "flutedGlass", "premiumColors"],
            "description": "Telescopic sliding door with soft-close hardware, 1+1 to 4+1 panels.",
        },
        {
            "id": "fold-bifold-aluminium-doors",
            "name": "Fold & Bi-Fold Aluminium Glass Doors",
            "slug": "fold-bifold-aluminium-doors",
            "category": "folding-systems",
            "subcategory": "bifold",
            "status": "active",
            "rates": {
                "baseRate": 1750,
                "useGlobalRates": False,
                "profiles": {"50mm": 0, "52mm": 0},
                "glass": {
                    "8mm-clear": 0,
                    "6mm-clear": -20,
                    "10mm-clear": 35,
                    "12mm-clear": 65,
                    "safety": 180,
                    "dgu": 200,
                },
            },
            "features": ["profileOptions", "glassOptions", "ralColors"],
            "description": "Bi-fold doors with 50mm and 52mm profiles. 8mm glass and mortice lock included.",
        },
        {
            "id": "fold-sliding-window-system",
            "name": "Fold & Sliding Window System",
            "slug": "fold-sliding-window-system",
            "category": "folding-systems",
            "subcategory": "fold-sliding",
            "status": "active",
            "rates": {
                "baseRate": 2250,
                "useGlobalRates": False,
                "glass": {
                    "8mm-clear": 0,
                    "10mm-clear": 35,
                    "8mm-clear-fluted": 85,
                    "8mm-grey-fluted": 115,
                    "8mm-brown-fluted": 115,
                },
                "premiumColors": dict(_PREMIUM_COLORS),
            },
            "features": ["glassOptions", "colorOptions", "premiumColors", "morticeLock"],
            "description": "2 door fold and slide system with imported slim profiles.",
        },
        # ── Louvers ───────────────────────────────────────────────────────
        {
            "id": "wooden-finish-aluminium-louvers",
            "name": "Wooden Finish Aluminium Louvers",
            "slug": "wooden-finish-aluminium-louvers",
            "category": "metal-louvers",
            "subcategory": "wooden-finish",
            "status": "active",
            "rates": {
                "baseRate": 450,
                "profileSize": "100x50x1.2MM",
                "profileGap": 12,
                "profileWeight12ft": 5.5,
                **_LOUVER_COMMON,
            },
            "features": ["louverCalculation", "wastageCalculation", "colorOptions"],
            "description": "100x50x1.2MM profiles installed every 12 inches.",
        },
        {
            "id": "curved-architectural-louvers",
            "name": "Architectural Curved Aluminium Louvers",
            "slug": "curved-architectural-louvers",
            "category": "metal-louvers",
            "subcategory": "sleek-curved",
            "status": "active",
            "rates": {
                "baseRate": 490,
                "profileSize": "60x40x1.2MM",
                "profileGap": 8,
                "profileWeight12ft": 4.8,
                "extraWastagePercent": 10,
                **_LOUVER_COMMON,
            },
            "features": ["louverCalculation", "wastageCalculation", "colorOptions"],
            "description": "60x40x1.2MM curved profiles installed every 8 inches.",
        },
        {
            "id": "ceiling-pergola-louvers",
            "name": "Ceiling Aluminium Louvers Pergola",
            "slug": "ceiling-pergola-louvers",
            "category": "metal-louvers",
            "subcategory": "ceiling-pergola",
            "status": "active",
            "rates": {
                "baseRate": 480,
                "profileSize": "25x75MM",
                "profileGap": 6,
                "profileWeight12ft": 3.7,
                **_LOUVER_COMMON,
            },
            "features": ["louverCalculation", "wastageCalculation", "colorOptions"],
            "description": "25x75MM ceiling profiles installed every 6 inches.",
        },
        # ── Shower partitions ─────────────────────────────────────────────
        {
            "id": "frameless-shower-partition",
            "name": "Frameless Shower Glass Door",
            "slug": "frameless-shower-partition",
            "category": "shower-partitions",
            "subcategory": "frameless",
            "status": "active",
            "rates": {
                "useGlobalRates": False,
                "maxHeight": 8,
                "standardHeight": 7,
                "hinged": {
                    "glassRate": 350,
                    "hardware": {"mill-finish": 4500, "black": 5500, "gold": 5500, "rose-gold": 7500},
                },
                "sliding": {
                    "glassRate": 450,
                    "hardware": {"mill-finish": 5500, "black": 6500, "gold": 6500},
                },
            },
            "features": ["lCornerSupport", "hardwareSelection", "heightLimit", "slidingOption"],
            "description": "10mm clear toughened glass, hinged or sliding, straight or L-corner.",
        },
        {
            "id": "premium-black-profile-shower",
            "name": "Premium Black Profile Shower Glass",
            "slug": "premium-black-profile-shower",
            "category": "shower-partitions",
            "subcategory": "black-profile",
            "status": "active",
            "rates": {"useGlobalRates": False, "glassRate": 650, "hardwarePerDoor": 4500},
            "features": ["lCornerSupport", "profileSelection", "importedHardware", "openableOnly"],
            "description": "Black slim profile shower with openable doors and 8mm glass.",
        },
        {
            "id": "black-profile-shower-partition",
            "name": "Black Profile Shower Glass Partition",
            "slug": "black-profile-shower-partition",
            "category": "shower-partitions",
            "subcategory": "black-profile-sliding",
            "status": "active",
            "rates": {
                "useGlobalRates": False,
                "baseGlassRate": 650,
                "roseGoldExtraPerSqft": 100,
                "hardware": {
                    "sliding": {"matt-black": 6500, "gold": 6500, "mill-finish": 5500, "rose-gold": 7500},
                },
            },
            "features": ["lCornerSupport", "profileSelection", "softCloseSliding", "dualDoorLCorner"],
            "description": "Soft-close sliding shower partition, dual doors for L-corner.",
        },
        {
            "id": "frosted-glass-bathroom-door",
            "name": "Frosted Glass Fold & Slide Door",
            "slug": "frosted-glass-bathroom-door",
            "category": "shower-partitions",
            "subcategory": "fold-slide-door",
            "status": "active",
            "rates": {
                "useGlobalRates": False,
                "baseRate": 1250,
                "frostingExtra": 25,
                "hardwarePerSet": 9500,
                "lockExtra": 2500,
            },
            "features": ["foldAndSlide", "lockOption"],
            "description": "8mm clear or frosted glass fold and slide door with optional lock.",
        },
        {
            "id": "slim-gold-profile-fluted-shower",
            "name": "Slim Gold Profile Fluted Shower Glass",
            "slug": "slim-frame-shower-partition",
            "category": "shower-partitions",
            "subcategory": "gold-profile",
            "status": "active",
            "rates": {
                "useGlobalRates": False,
                "baseRate": 850,
                "flutedGlassExtra": 100,
                "hardwarePerDoor": 7500,
            },
            "features": ["goldProfile", "flutedGlass", "softClose"],
            "description": "Gold PVD profile with fluted glass, openable or sliding.",
        },
        # ── Cladding ──────────────────────────────────────────────────────
        {
            "id": "hpl-exterior-cladding",
            "name": "HPL Exterior Cladding & Ceiling",
            "slug": "hpl-exterior-cladding",
            "category": "elevation-cladding",
            "subcategory": "hpl-cladding",
            "status": "active",
            "rates": {
                "useGlobalRates": False,
                "wastagePercent": 5,
                "brands": {
                    "fundermax": {"sheetWidthMM": 1300, "sheetHeightMM": 3050, "ratePerSqft": 465},
                    "greenlam": {"sheetWidthMM": 1300, "sheetHeightMM": 3050, "ratePerSqft": 350},
                    "newmika": {"sheetWidthMM": 1220, "sheetHeightMM": 2440, "ratePerSqft": 295},
                },
                "installation": {
                    "ceiling": {"ratePerSqft": 165},
                    "facade": {"ratePerSqft": 145},
                },
            },
            "features": ["brandSelection", "sheetCalculation", "wastageCalculation", "installationOptions"],
            "description": "6mm HPL cladding with aluminium framework installation.",
        },
        {
            "id": "acp-elevation",
            "name": "ACP Elevation Cladding",
            "slug": "acp-elevation-cladding",
            "category": "elevation-cladding",
            "subcategory": "acp-cladding",
            "status": "active",
            "rates": {
                "useGlobalRates": False,
                "wastagePercent": 5,
                "standardSheetSqft": 48,
                "commercial": {
                    "3mm": {"plain": 270, "wooden": 320},
                    "4mm": {"plain": 310, "wooden": 380},
                    "6mm": {"plain": 390, "wooden": 450},
                },
                "frGradeB": {"4mm": {"plain": 520}},
            },
            "features": [
                "projectTypeSelection", "colorTypeSelection", "thicknessSelection",
                "sheetCalculation", "wastageCalculation", "frGradeOption",
            ],
            "description": "PVDF coated ACP with 4x4 grid aluminium framework.",
        },
    ],
}

# backend/citizen_feedback/analytics/catalog.py
"""
Static lookups shared by the public form and the dashboard:
canonical departments with their known localized labels, the police
station list, and suggested corrective measures per department.
"""
from typing import Dict, List, NamedTuple

TRAFFIC = "Traffic"
WOMEN_SAFETY = "Women Safety"
NARCOTIC_DRUGS = "Narcotic Drugs"
CYBER_CRIME = "Cyber Crime"

CANONICAL_DEPARTMENTS: List[str] = [TRAFFIC, WOMEN_SAFETY, NARCOTIC_DRUGS, CYBER_CRIME]

# Known labels per canonical department (English + Marathi, including the
# labels the public form itself submits).
DEPARTMENT_VARIANTS: Dict[str, List[str]] = {
    TRAFFIC: ["Traffic", "वाहतूक", "ट्रॅफिक", "वाहतूक विभाग"],
    WOMEN_SAFETY: ["Women Safety", "महिला सुरक्षा", "महिला सुरक्षा विभाग"],
    NARCOTIC_DRUGS: [
        "Narcotic Drugs",
        "Action against Narcotics",
        "अमली पदार्थ",
        "अमली पदार्थ विरुद्ध कारवाई",
        "ड्रग्स",
        "अमली पदार्थ विभाग",
    ],
    CYBER_CRIME: ["Cyber Crime", "सायबर गुन्हे", "सायबर", "सायबर क्राईम", "सायबर गुन्हे विभाग"],
}

# Labels the public form shows, per language.
FORM_DEPARTMENT_LABELS: Dict[str, List[str]] = {
    "en": ["Traffic", "Women Safety", "Action against Narcotics", "Cyber Crime"],
    "mr": ["वाहतूक", "महिला सुरक्षा", "अमली पदार्थ विरुद्ध कारवाई", "सायबर गुन्हे"],
}


class PoliceStation(NamedTuple):
    en: str
    mr: str


POLICE_STATIONS: List[PoliceStation] = [
    PoliceStation("Akole", "अकोले"),
    PoliceStation("Ashwi", "अश्वी"),
    PoliceStation("Belavandi", "बेलवंडी"),
    PoliceStation("Bhingar Camp", "भिंगार कॅम्प"),
    PoliceStation("Ghargaon", "घारगाव"),
    PoliceStation("Jamkhed", "जामखेड"),
    PoliceStation("Karjat", "कर्जत"),
    PoliceStation("Kharda", "खर्डा"),
    PoliceStation("Kopargaon City", "कोपरगाव शहर"),
    PoliceStation("Kopargaon Rural", "कोपरगाव ग्रामीण"),
    PoliceStation("Kotwali", "कोतवाली"),
    PoliceStation("Loni", "लोणी"),
    PoliceStation("MIDC (A.nagar)", "एम आय डी सी (अ.नगर)"),
    PoliceStation("Mirajgaon", "मिरजगाव"),
    PoliceStation("Nagar Taluka", "नगर तालुका"),
    PoliceStation("Newasa", "नेवासा"),
    PoliceStation("Parner", "पारनेर"),
    PoliceStation("Pathardi", "पाथर्डी"),
    PoliceStation("Rahata", "राहाता"),
    PoliceStation("Rahuri", "राहुरी"),
    PoliceStation("Rajur", "राजूर"),
    PoliceStation("Sangamner City", "संगमनेर शहर"),
    PoliceStation("Sangamner Rural", "संगमनेर ग्रामीण"),
    PoliceStation("Shani Shingnapur", "शनि शिंगणापूर"),
    PoliceStation("Shevgaon", "शेवगाव"),
    PoliceStation("Shirdi", "शिर्डी"),
    PoliceStation("Shrigonda", "श्रीगोंदा"),
    PoliceStation("Shrirampur City", "श्रीरामपूर शहर"),
    PoliceStation("Shrirampur Rural", "श्रीरामपूर ग्रामीण"),
    PoliceStation("Sonai", "सोनई"),
    PoliceStation("Supa", "सुपा"),
    PoliceStation("Tofkhana", "तोफखाना"),
]

STATION_NAMES: List[str] = [s.en for s in POLICE_STATIONS]

CORRECTIVE_MEASURES: Dict[str, List[str]] = {
    CYBER_CRIME: [
        "Improve Response Time: Implement faster case processing workflow",
        "Staff Training: Provide regular technical training on cybersecurity",
        "Enhanced Communication: Update users on case status regularly",
        "Private Sector Collaboration: Work with cybersecurity firms",
        "Public Awareness Campaigns: Educate on common cybercrimes",
    ],
    WOMEN_SAFETY: [
        "Increase Patrols: Enhance surveillance in high-risk areas",
        "Gender Sensitivity Training: Regular workshops for officers",
        "Quick Response System: Implement mobile app for reporting",
        "Community Outreach: Collaborate with local NGOs",
        "Transparent Reporting: Create case tracking system",
    ],
    NARCOTIC_DRUGS: [
        "Better Investigation Techniques: Use advanced detection technology",
        "Rehabilitation Programs: Partner with rehab centers",
        "Public Education: Develop campaigns about drug dangers",
        "International Coordination: Share intelligence across borders",
        "Specialized Training: Train officers on handling drug cases",
    ],
    TRAFFIC: [
        "Increase Enforcement: Deploy officers at high-traffic areas",
        "Infrastructure Improvements: Upgrade signaling systems",
        "Safety Campaigns: Promote safe driving practices",
        "Real-Time Monitoring: Implement traffic alert systems",
        "Local Collaboration: Work with authorities on road safety",
    ],
}

MONTH_NAMES: List[str] = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

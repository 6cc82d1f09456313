"""
Static reference tables used by the AI and matching services.

- SKILL_VOCABULARY: known skill terms scanned when AI extraction is unavailable
- SKILL_CATEGORIES: keyword lists used to categorise a skill name
- NSQF_KEYWORDS / NSQF_TYPE_DEFAULTS: heuristic level prediction
- CAREER_PATHS: career suggestions scored by skill overlap
- ROLE_SKILLS / ROLE_ALIASES: skill-gap role catalog
- NSQF_PATHWAY: what to study to move from one level to the next
- CREDENTIAL_RECOMMENDATIONS: next credentials per skill area
"""

SKILL_VOCABULARY = [
    # Programming languages
    "JavaScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Rust",
    "Swift", "Kotlin", "TypeScript",
    # Frontend
    "React", "Angular", "Vue", "HTML", "CSS", "SASS", "Bootstrap", "Tailwind",
    "jQuery", "Redux", "Next.js",
    # Backend
    "Node.js", "Express", "Django", "Flask", "Spring", "Laravel", "ASP.NET",
    "FastAPI", "NestJS",
    # Databases
    "MongoDB", "SQL", "PostgreSQL", "MySQL", "Redis", "Cassandra", "Oracle",
    "SQLite", "DynamoDB",
    # Cloud & DevOps
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Jenkins", "CI/CD",
    "Terraform", "Ansible",
    # Mobile
    "React Native", "Flutter", "iOS", "Android", "Xamarin", "Ionic",
    # Data & AI
    "Machine Learning", "Deep Learning", "AI", "Data Science", "TensorFlow",
    "PyTorch", "Scikit-learn", "Pandas", "NumPy", "Keras", "NLP",
    "Computer Vision", "Data Analysis", "Statistics",
    # Tools & practices
    "Git", "GitHub", "GitLab", "REST API", "GraphQL", "Microservices", "Agile",
    "Scrum", "Testing", "Jest", "Selenium", "Webpack", "Linux", "Bash",
    "PowerShell",
]

SKILL_CATEGORIES = {
    "technical": [
        "programming", "web development", "data science", "machine learning",
        "cloud computing", "database", "frontend", "backend",
        "mobile development", "devops", "cybersecurity", "networking",
    ],
    "soft-skills": [
        "communication", "leadership", "teamwork", "problem solving",
        "analytical thinking", "creativity", "time management",
    ],
    "management": [
        "project management", "team leadership", "strategic planning",
        "resource management",
    ],
}

# Checked from level 10 down to 1, first hit wins
NSQF_KEYWORDS = {
    1: ["basic", "introduction", "beginner", "fundamental", "elementary"],
    2: ["elementary", "primary", "basic skills", "foundational"],
    3: ["intermediate", "foundation", "core skills", "essential"],
    4: ["advanced foundation", "skilled", "competent", "proficient"],
    5: ["diploma", "advanced", "proficient", "skilled worker", "certificate"],
    6: ["bachelor", "degree", "graduate", "advanced diploma", "professional", "undergraduate"],
    7: ["postgraduate", "masters", "specialized", "expert", "advanced professional"],
    8: ["masters degree", "postgraduate diploma", "advanced professional", "mba"],
    9: ["doctoral", "phd", "research", "highly specialized", "doctorate"],
    10: ["doctorate", "phd", "research doctorate", "highest qualification", "post-doctoral"],
}

NSQF_TYPE_DEFAULTS = {
    "certificate": 5,
    "diploma": 6,
    "degree": 7,
    "micro-credential": 4,
    "badge": 3,
    "other": 5,
}
NSQF_DEFAULT_LEVEL = 5

NSQF_LEVEL_DESCRIPTIONS = {
    1: "Basic/Elementary skills",
    2: "Foundational skills",
    3: "Intermediate/Core skills",
    4: "Skilled/Competent",
    5: "Diploma/Advanced certificate",
    6: "Bachelor degree/Professional",
    7: "Masters/Postgraduate",
    8: "Advanced Masters/MBA",
    9: "Doctoral/PhD",
    10: "Post-doctoral/Highest qualification",
}

CAREER_PATHS = [
    {
        "title": "Full Stack Developer",
        "skills": ["javascript", "react", "node", "html", "css"],
        "description": "Build complete web applications from frontend to backend",
    },
    {
        "title": "Frontend Developer",
        "skills": ["javascript", "react", "html", "css", "ui"],
        "description": "Create beautiful and responsive user interfaces",
    },
    {
        "title": "Backend Developer",
        "skills": ["node", "python", "java", "sql", "api"],
        "description": "Build robust server-side applications and APIs",
    },
    {
        "title": "Data Scientist",
        "skills": ["python", "machine learning", "statistics", "data"],
        "description": "Analyze data and build predictive models",
    },
    {
        "title": "DevOps Engineer",
        "skills": ["docker", "kubernetes", "aws", "ci/cd", "linux"],
        "description": "Automate and optimize software deployment",
    },
    {
        "title": "Mobile Developer",
        "skills": ["react native", "flutter", "ios", "android", "mobile"],
        "description": "Create mobile applications for iOS and Android",
    },
    {
        "title": "Machine Learning Engineer",
        "skills": ["python", "tensorflow", "pytorch", "machine learning"],
        "description": "Build and deploy AI/ML models",
    },
    {
        "title": "Cloud Architect",
        "skills": ["aws", "azure", "cloud", "kubernetes", "docker"],
        "description": "Design and implement cloud infrastructure",
    },
]

_DEVELOPER_CORE = [
    "JavaScript", "Python", "Java", "Git", "SQL", "Data Structures",
    "Algorithms", "OOP", "Testing", "Debugging",
]

ROLE_SKILLS = {
    "Software Developer": list(_DEVELOPER_CORE),
    "Software Engineer": list(_DEVELOPER_CORE),
    "Full Stack Developer": [
        "JavaScript", "React", "Node.js", "Express", "MongoDB", "SQL", "HTML",
        "CSS", "Git", "REST API",
    ],
    "Data Scientist": [
        "Python", "Machine Learning", "Statistics", "SQL", "Data Visualization",
        "Pandas", "NumPy", "Scikit-learn", "R", "Deep Learning",
    ],
    "DevOps Engineer": [
        "Docker", "Kubernetes", "CI/CD", "AWS", "Linux", "Git", "Jenkins",
        "Terraform", "Monitoring", "Scripting",
    ],
    "Frontend Developer": [
        "JavaScript", "React", "HTML", "CSS", "TypeScript", "Webpack", "Git",
        "Responsive Design", "UI/UX", "Testing",
    ],
    "Backend Developer": [
        "Node.js", "Python", "Java", "SQL", "MongoDB", "REST API",
        "Microservices", "Git", "Authentication", "Security",
    ],
    "Mobile Developer": [
        "React Native", "Flutter", "iOS", "Android", "Mobile UI/UX",
        "API Integration", "Git", "App Store", "Testing",
    ],
    "Cloud Architect": [
        "AWS", "Azure", "Cloud Security", "Networking",
        "Infrastructure as Code", "Kubernetes", "Docker", "Serverless",
        "Cost Optimization",
    ],
    "Machine Learning Engineer": [
        "Python", "TensorFlow", "PyTorch", "Machine Learning", "Deep Learning",
        "Data Processing", "MLOps", "Statistics", "Model Deployment",
    ],
    "Web Developer": [
        "HTML", "CSS", "JavaScript", "React", "Node.js", "Git",
        "Responsive Design", "REST API", "Database", "Testing",
    ],
    "UI/UX Designer": [
        "Figma", "Adobe XD", "Sketch", "Prototyping", "User Research",
        "Wireframing", "Design Systems", "HTML", "CSS",
    ],
    "Database Administrator": [
        "SQL", "MongoDB", "PostgreSQL", "MySQL", "Database Design",
        "Performance Tuning", "Backup", "Security", "Replication",
    ],
    "QA Engineer": [
        "Testing", "Selenium", "Jest", "Test Automation", "Bug Tracking",
        "API Testing", "Performance Testing", "Git", "CI/CD",
    ],
    "Product Manager": [
        "Product Strategy", "Agile", "Scrum", "User Stories", "Roadmapping",
        "Analytics", "Communication", "Stakeholder Management",
    ],
    "Project Manager": [
        "Project Planning", "Agile", "Scrum", "Risk Management", "Budgeting",
        "Communication", "Leadership", "MS Project", "JIRA",
    ],
    "Business Analyst": [
        "Requirements Analysis", "SQL", "Data Analysis", "Documentation",
        "Stakeholder Management", "Process Modeling", "Excel", "Communication",
    ],
    "Data Analyst": [
        "SQL", "Excel", "Python", "Data Visualization", "Tableau", "Power BI",
        "Statistics", "Data Cleaning", "Reporting",
    ],
    "Cybersecurity Specialist": [
        "Network Security", "Penetration Testing", "Cryptography",
        "Security Auditing", "Firewall", "SIEM", "Incident Response",
        "Compliance",
    ],
    "Network Engineer": [
        "Networking", "TCP/IP", "Routing", "Switching", "Firewall", "VPN",
        "Network Security", "Troubleshooting", "Cisco", "Linux",
    ],
    "System Administrator": [
        "Linux", "Windows Server", "Networking", "Scripting", "Virtualization",
        "Backup", "Security", "Monitoring", "Troubleshooting",
    ],
    "AI Engineer": [
        "Python", "Machine Learning", "Deep Learning", "TensorFlow", "PyTorch",
        "NLP", "Computer Vision", "Model Deployment", "MLOps",
    ],
}

# Order matters for the substring pass: first alias contained in the input wins
ROLE_ALIASES = {
    "software engineer": "Software Engineer",
    "software engg": "Software Engineer",
    "software dev": "Software Developer",
    "swe": "Software Engineer",
    "full stack": "Full Stack Developer",
    "fullstack": "Full Stack Developer",
    "frontend": "Frontend Developer",
    "front end": "Frontend Developer",
    "backend": "Backend Developer",
    "back end": "Backend Developer",
    "data scientist": "Data Scientist",
    "ds": "Data Scientist",
    "ml engineer": "Machine Learning Engineer",
    "machine learning": "Machine Learning Engineer",
    "devops": "DevOps Engineer",
    "dev ops": "DevOps Engineer",
    "mobile dev": "Mobile Developer",
    "app developer": "Mobile Developer",
    "cloud engineer": "Cloud Architect",
    "web dev": "Web Developer",
    "web developer": "Web Developer",
    "ui designer": "UI/UX Designer",
    "ux designer": "UI/UX Designer",
    "dba": "Database Administrator",
    "qa": "QA Engineer",
    "tester": "QA Engineer",
    "pm": "Product Manager",
    "product": "Product Manager",
    "project": "Project Manager",
    "ba": "Business Analyst",
    "analyst": "Data Analyst",
    "security": "Cybersecurity Specialist",
    "network": "Network Engineer",
    "sysadmin": "System Administrator",
    "sys admin": "System Administrator",
    "ai engineer": "AI Engineer",
    "artificial intelligence": "AI Engineer",
}

# Keyed by the current level (0 = no credentials yet)
NSQF_PATHWAY = {
    0: {
        "title": "Start with Basic Skills",
        "courses": ["Basic Computer Skills", "Communication Skills", "Workplace Safety"],
        "duration": "1-3 months",
    },
    1: {
        "title": "Elementary Skills Development",
        "courses": ["Basic Technical Skills", "Team Collaboration", "Problem Solving"],
        "duration": "3-6 months",
    },
    2: {
        "title": "Foundation Certificate",
        "courses": ["Industry-specific Foundation Course", "Practical Skills Training"],
        "duration": "6-12 months",
    },
    3: {
        "title": "Skilled Worker Certification",
        "courses": ["Advanced Technical Skills", "Quality Standards", "Process Management"],
        "duration": "1-2 years",
    },
    4: {
        "title": "Diploma Program",
        "courses": ["Professional Diploma", "Specialized Training", "Industry Certification"],
        "duration": "2-3 years",
    },
    5: {
        "title": "Bachelor Degree",
        "courses": ["Undergraduate Degree Program", "Professional Certification"],
        "duration": "3-4 years",
    },
    6: {
        "title": "Postgraduate Studies",
        "courses": ["Masters Program", "Advanced Professional Certification"],
        "duration": "1-2 years",
    },
    7: {
        "title": "Advanced Masters",
        "courses": ["MBA", "Specialized Masters", "Executive Programs"],
        "duration": "1-2 years",
    },
    8: {
        "title": "Doctoral Studies",
        "courses": ["PhD Program", "Research Fellowship", "Advanced Research"],
        "duration": "3-5 years",
    },
    9: {
        "title": "Post-Doctoral Research",
        "courses": ["Post-Doctoral Fellowship", "Research Leadership"],
        "duration": "2-3 years",
    },
}

CREDENTIAL_RECOMMENDATIONS = {
    "web development": [
        "Advanced React Certification",
        "Full Stack Development Diploma",
        "Cloud Architecture Certificate",
    ],
    "data science": [
        "Machine Learning Specialization",
        "Data Analytics Professional Certificate",
        "AI Engineering Diploma",
    ],
    "mobile development": [
        "iOS Development Certificate",
        "Android Development Professional",
        "Cross-Platform Mobile Development",
    ],
}

EMERGING_SKILLS = [
    {"skill": "AI/ML", "growth": "+45%", "category": "technical"},
    {"skill": "Cloud Computing", "growth": "+38%", "category": "technical"},
    {"skill": "Cybersecurity", "growth": "+35%", "category": "technical"},
    {"skill": "Data Science", "growth": "+32%", "category": "technical"},
    {"skill": "DevOps", "growth": "+30%", "category": "technical"},
]

DECLINING_SKILLS = [
    {"skill": "Legacy Systems", "decline": "-15%", "category": "technical"},
]

"""
Skill extraction from free text.

Two sources, unioned with dictionary hits first:
1. Vocabulary scan: whole-token matches against curated term lists
2. Cue phrases: "experience with X", "Python experience", "Technologies: X, Y"
"""

import re
import logging
from typing import Dict, List, Optional, Pattern, Tuple

from core.rules import Rule, RuleTable

logger = logging.getLogger(__name__)

MAX_SKILLS = 15
MIN_SKILL_LENGTH = 2
MAX_SKILL_LENGTH = 30
MAX_SKILL_WORDS = 3

SKILL_VOCABULARY: Dict[str, List[str]] = {
    'programming': [
        'JavaScript', 'TypeScript', 'React', 'Angular', 'Vue.js', 'Node.js', 'Next.js', 'Nuxt.js',
        'Python', 'Java', 'C++', 'C#', 'PHP', 'Ruby', 'Go', 'Rust', 'Swift', 'Kotlin', 'Scala',
        'Dart', 'R', 'MATLAB', 'Perl', 'Shell', 'Bash', 'PowerShell', 'Assembly', 'COBOL',
        'Fortran', 'Pascal', 'Delphi', 'Objective-C', 'Clojure', 'Haskell', 'Erlang', 'Elixir',
        'F#', 'OCaml', 'Lisp', 'Prolog', 'Smalltalk', 'Ada', 'VHDL', 'Verilog',
    ],
    'web': [
        'HTML', 'CSS', 'Sass', 'Less', 'Stylus', 'Bootstrap', 'Tailwind CSS', 'Material-UI',
        'Ant Design', 'Chakra UI', 'Semantic UI', 'Foundation', 'Bulma', 'Pure CSS',
        'Webpack', 'Babel', 'Vite', 'Rollup', 'Parcel', 'Gulp', 'Grunt', 'Browserify',
        'ESLint', 'Prettier', 'Stylelint', 'PostCSS', 'Autoprefixer',
    ],
    'databases': [
        'MongoDB', 'PostgreSQL', 'MySQL', 'SQLite', 'Redis', 'Elasticsearch', 'Cassandra',
        'DynamoDB', 'Firebase', 'Supabase', 'Neo4j', 'InfluxDB', 'CouchDB', 'RethinkDB',
        'MariaDB', 'Oracle', 'SQL Server', 'DB2', 'Sybase', 'Teradata', 'Snowflake',
        'BigQuery', 'Redshift', 'Athena', 'Hive', 'Impala', 'Presto',
    ],
    'cloud': [
        'AWS', 'Azure', 'GCP', 'Heroku', 'Vercel', 'Netlify', 'DigitalOcean',
        'Linode', 'Vultr', 'Cloudflare', 'Fastly', 'Akamai', 'CDN', 'Lambda', 'Serverless',
        'Docker', 'Kubernetes', 'Terraform', 'Ansible', 'Chef', 'Puppet', 'Jenkins',
        'GitHub Actions', 'GitLab CI', 'Travis CI', 'CircleCI', 'TeamCity', 'Bamboo',
    ],
    'frameworks': [
        'Express.js', 'Fastify', 'Koa', 'NestJS', 'AdonisJS', 'Django', 'Flask', 'FastAPI',
        'Spring Boot', 'Spring MVC', 'Laravel', 'Symfony', 'CodeIgniter', 'ASP.NET',
        'ASP.NET Core', 'Ruby on Rails', 'Sinatra', 'Phoenix', 'Gin', 'Echo', 'Fiber',
        'Gorilla', 'Mux', 'Chi', 'JWT', 'OAuth', 'OpenID Connect', 'SAML',
    ],
    'testing': [
        'Jest', 'Mocha', 'Chai', 'Sinon', 'Cypress', 'Playwright', 'Selenium', 'Puppeteer',
        'TestCafe', 'Nightwatch.js', 'Protractor', 'Karma', 'Jasmine', 'Vitest',
        'PyTest', 'Unittest', 'Robot Framework', 'JUnit', 'TestNG', 'Mockito',
        'PowerMock', 'Selenium WebDriver', 'Appium', 'Detox', 'XCUITest', 'Espresso',
    ],
    'methodologies': [
        'Agile', 'Scrum', 'Kanban', 'Lean', 'DevOps', 'CI/CD', 'TDD', 'BDD', 'DDD',
        'Microservices', 'Monolith', 'Event-Driven', 'CQRS', 'Event Sourcing',
        'Domain-Driven Design', 'Clean Architecture', 'SOLID', 'DRY', 'KISS',
    ],
}

# Ordinary English words: only matched with their exact casing
CASE_SENSITIVE_TERMS = {
    'Go', 'R', 'Less', 'Lean', 'Shell', 'Assembly', 'Swift', 'Rust', 'Ruby', 'Ada',
    'Foundation', 'Parcel', 'Gulp', 'Grunt', 'Rollup', 'Oracle', 'Athena', 'Hive',
    'Presto', 'Impala', 'Snowflake', 'Lambda', 'Chef', 'Puppet', 'Bamboo', 'Phoenix',
    'Gin', 'Echo', 'Fiber', 'Gorilla', 'Mux', 'Chi', 'Chai', 'Karma', 'Jasmine',
    'Detox', 'Espresso', 'Monolith', 'SOLID', 'DRY', 'KISS', 'Stylus', 'Sinon', 'Koa',
    'Dart', 'Delphi', 'Pascal', 'Lisp', 'Serverless', 'Agile',
}

# Sentence end: terminal punctuation followed by whitespace or end of text
_UNTIL_SENTENCE_END = r'([^\n]+?)(?=[.;!?](?:\s|$)|\n|$)'

CUE_RULES = RuleTable('skill_cues', [
    Rule(
        'experience_with',
        r'(?:experience\s+(?:with|in)|proficien(?:t|cy)\s+(?:in|with)|knowledge\s+of|'
        r'familiar(?:ity)?\s+with|expertise\s+(?:in|with))\s+' + _UNTIL_SENTENCE_END,
    ),
    Rule(
        'capitalized_experience',
        re.compile(
            r'((?:[A-Z][\w.+#-]*|C\+\+|C#)(?:\s+[A-Z][\w.+#-]*){0,2})\s+'
            r'(?:experience|proficiency|expertise|skills)\b'
        ),
    ),
    Rule(
        'technologies_list',
        r'(?:technologies|tools|frameworks|languages|platforms|tech\s+stack)\s*:\s*' + _UNTIL_SENTENCE_END,
    ),
    Rule(
        'requirements_list',
        r'(?:required|preferred|must\s+have|should\s+have|requirements)\s*:\s*' + _UNTIL_SENTENCE_END,
    ),
])

_LIST_SPLIT = re.compile(r'\s*,\s*|\s+(?:and|or|&)\s+|^(?:and|or)\s+', re.IGNORECASE)
_LEADING_FILLER = re.compile(
    r'^(?:and|or|with|in|the|a|an|strong|solid|good|excellent|proven|relevant|prior|'
    r'previous|professional|hands-on|deep|some)\s+',
    re.IGNORECASE,
)
_STRIP_CHARS = ' \t\r\n.;:()[]{}"\'*'


def _term_pattern(term: str) -> Pattern:
    flags = 0 if term in CASE_SENSITIVE_TERMS else re.IGNORECASE
    return re.compile(r'(?<![\w.+#&-])' + re.escape(term) + r'(?![\w+#&-])', flags)


class SkillExtractor:
    """
    Mines job text for technology and methodology skills.

    Output is deduplicated case-insensitively and capped at MAX_SKILLS.
    """

    def __init__(self, vocabulary: Optional[Dict[str, List[str]]] = None, cue_rules: Optional[RuleTable] = None):
        self.vocabulary = vocabulary or SKILL_VOCABULARY
        self.cue_rules = cue_rules or CUE_RULES
        self._term_patterns: List[Tuple[str, Pattern]] = []
        seen = set()
        for terms in self.vocabulary.values():
            for term in terms:
                if term.lower() in seen:
                    continue
                seen.add(term.lower())
                self._term_patterns.append((term, _term_pattern(term)))

    def dictionary_skills(self, text: str) -> List[str]:
        """Vocabulary terms present in text, in vocabulary order."""
        return [term for term, pattern in self._term_patterns if pattern.search(text)]

    def cue_skills(self, text: str) -> List[str]:
        """Skills named after cue phrases, in rule order."""
        found = []
        for capture in self.cue_rules.all(text):
            for candidate in _LIST_SPLIT.split(capture):
                skill = self._clean_candidate(candidate)
                if skill:
                    found.append(skill)
        return found

    @staticmethod
    def _clean_candidate(candidate: Optional[str]) -> Optional[str]:
        if not candidate:
            return None
        skill = candidate.strip(_STRIP_CHARS)
        while True:
            stripped = _LEADING_FILLER.sub('', skill)
            if stripped == skill:
                break
            skill = stripped
        skill = skill.strip(_STRIP_CHARS)
        if not is_valid_skill(skill):
            return None
        words = skill.split()
        if len(words) > MAX_SKILL_WORDS:
            return None
        # Captured prose ("the ability to ...") starts lower-case
        if words[0][0].islower():
            return None
        return skill

    def extract(self, text: Optional[str]) -> List[str]:
        """
        Extract skills from free text.

        Args:
            text: Job description or any free text

        Returns:
            Unique skills (case-insensitive), at most MAX_SKILLS entries
        """
        if not text or not text.strip():
            return []

        candidates = self.dictionary_skills(text) + self.cue_skills(text)
        skills = dedupe_skills([skill for skill in candidates if is_valid_skill(skill)])
        if len(skills) > MAX_SKILLS:
            logger.debug(f"[skills] Truncating {len(skills)} skills to {MAX_SKILLS}")
        return skills[:MAX_SKILLS]


def is_valid_skill(skill: Optional[str]) -> bool:
    return bool(skill) and MIN_SKILL_LENGTH <= len(skill) <= MAX_SKILL_LENGTH


def dedupe_skills(skills: List[str]) -> List[str]:
    """Drop case-insensitive duplicates, keeping the first spelling."""
    seen = set()
    unique = []
    for skill in skills:
        key = skill.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(skill.strip())
    return unique


# Global extractor instance
skill_extractor = SkillExtractor()

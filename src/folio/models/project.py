"""Showcase projects listed on the projects page."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Project:
    title: str
    description: str
    technologies: str
    image: str
    code: str
    link: str

    @property
    def technology_list(self) -> list[str]:
        return [tech.strip() for tech in self.technologies.split(",") if tech.strip()]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        return cls(
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            technologies=str(data.get("technologies", "")),
            image=str(data.get("image", "")),
            code=str(data.get("code", "")),
            link=str(data.get("link", "")),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


_WEBGAME = Project(
    title="Browser Game",
    description=(
        "A fun and engaging browser-based game built with vanilla JavaScript. "
        "Implements game mechanics using the requestAnimationFrame API, features smooth "
        "animations, collision detection, and a scoring system. Demonstrates strong "
        "understanding of DOM manipulation and event handling."
    ),
    technologies="JavaScript, HTML Canvas, CSS Animations",
    image="images/projects/webgame.jpg",
    code="https://github.com/madh-zealand/tba",
    link="#webgame",
)

PROJECTS: tuple[Project, ...] = (
    Project(
        title="Portfolio Website",
        description=(
            "A modern portfolio website built from scratch. Features a clean, responsive "
            "design with a mobile-first approach, optimized performance, and maintainable "
            "object-oriented code. Includes custom form handling with rate limiting and a "
            "modular template system."
        ),
        technologies="Python, HTML5, CSS3, Responsive Design",
        image="images/projects/portfolio.jpg",
        code="https://github.com/madh-zealand/2sem-codetrack-01-portfolio",
        link="#portfolio",
    ),
    Project(
        title="Digital Guestbook",
        description=(
            "An interactive guestbook application that allows visitors to leave messages "
            "and engage with the community. Features user-friendly forms with validation, "
            "spam protection, and a clean interface. Messages are stored securely and "
            "displayed in a paginated format."
        ),
        technologies="PHP, MySQL, CSS Grid/Flexbox, Form Validation",
        image="images/projects/guestbook.jpg",
        code="https://github.com/madh-zealand/tba",
        link="#guestbook",
    ),
    _WEBGAME,
    _WEBGAME,
)

# canonical CV schema (empty strings / empty lists – no placeholders)
CV_SCHEMA = {
    "personalInfo": {
        "fullName": "",
        "title": "",
        "photo": "",
        "email": "",
        "phone": "",
        "location": "",
        "linkedin": "",
        "website": "",
    },
    "summary": "",
    "experience": [],
    "education": [],
    "skills": [],
    "courses": [],
    "certifications": [],
    "awards": [],
    "visibility": {},
    "sidebarOrder": [],
}

DEFAULT_SIDEBAR_ORDER = ("contact", "summary", "skills")

DEFAULT_VISIBILITY = {
    "location": True,
    "linkedin": True,
    "website": True,
    "summary": True,
    "courses": False,
    "certifications": False,
    "awards": False,
}

CONTACT_FIELDS = ("email", "phone", "location", "linkedin", "website")

# collection -> (id prefix, string fields in display order)
ENTRY_FIELDS = {
    "experience": ("exp", ("company", "position", "startDate", "endDate", "description")),
    "education": ("edu", ("institution", "degree", "startDate", "endDate", "description")),
    "skills": ("skill", ("category",)),
    "courses": ("course", ("name", "institution", "date", "description")),
    "certifications": ("cert", ("name", "issuer", "date", "description")),
    "awards": ("award", ("name", "issuer", "date", "description")),
}

COLLECTIONS = tuple(ENTRY_FIELDS)

# older documents used different top-level / personalInfo key names
LEGACY_KEYS = {
    "experience": ("experiences",),
    "skills": ("skillCategories",),
    "sidebarOrder": ("sidebarSections",),
}
LEGACY_PERSONAL_KEYS = {
    "title": ("jobTitle",),
    "photo": ("photoUrl",),
}

# canonical markup whitelist – anything else is text, not structure
BLOCK_TAGS = frozenset({"p", "h2", "h3", "h4", "ul", "ol", "li", "blockquote"})
INLINE_TAGS = frozenset({"strong", "em", "u", "s", "span", "mark", "br"})
MARKUP_TAGS = BLOCK_TAGS | INLINE_TAGS

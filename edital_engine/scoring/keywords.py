"""
Keyword tables used by the sub-score rules. Entries are matched on
normalized text (lower case, no accents) on word boundaries.
"""

# Generic technology terms that count as expertise for any IT company
GENERIC_TECH_KEYWORDS = ("sistema", "software", "tecnologia", "informatica")

COMPLEXITY_KEYWORDS = (
    "integracao", "api", "microservicos", "blockchain", "ia", "machine learning",
    "big data", "cloud", "aws", "azure", "devops", "kubernetes",
)

TECHNOLOGY_KEYWORDS = (
    "java", "javascript", "python", "php", "nodejs", "react", "angular",
    "vue", "mysql", "postgresql", "mongodb", "oracle", "aws", "azure",
    "docker", "kubernetes", "linux", "windows",
)

BASIC_DOCUMENTS = (
    "certidao regularidade fiscal", "cnpj", "contrato social",
    "certidao municipal", "certidao estadual", "fgts", "inss",
)

TECHNICAL_DOCUMENTS = (
    "atestado capacidade tecnica", "certidao acervo tecnico",
    "comprovacao experiencia", "qualificacao tecnica",
)

FINANCIAL_DOCUMENTS = (
    "balanco patrimonial", "demonstracao resultado",
    "capital social", "patrimonio liquido", "faturamento",
)

FEDERAL_AGENCY_KEYWORDS = ("federal", "ministerio")
MUNICIPAL_AGENCY_KEYWORDS = ("municipal",)

HIGH_RISK_KEYWORDS = (
    "missao critica", "seguranca nacional", "dados sensiveis",
    "alta disponibilidade", "24x7", "sla rigoroso",
)

SPECIALIZATION_KEYWORDS = (
    "especializado", "customizado", "especifico", "proprietario",
    "integracao complexa", "arquitetura avancada",
)

# States with the largest supplier markets
MAJOR_MARKET_STATES = frozenset({"SP", "RJ", "MG"})

# Modality fragments (normalized with underscores)
AUCTION_MODALITY = "pregao"
OPEN_COMPETITION_MODALITY = "concorrencia"
INVITATION_MODALITY = "convite"
LIMITED_TENDER_MODALITY = "tomada_preco"
EMERGENCY_MODALITY = "emergencia"
PRICE_REGISTRY_MODALITY = "registro_preco"

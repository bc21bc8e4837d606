"""
Default Brazilian retail vocabulary.

Pure data: state codes, regions, street types and the name fragments that
product, supplier, operator and customer names are composed from.
"""

STATES = [
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA",
    "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI", "RJ", "RN",
    "RS", "RO", "RR", "SC", "SP", "SE", "TO",
]

REGIONS = ["Norte", "Nordeste", "Centro-Oeste", "Sudeste", "Sul"]

STREET_TYPES = ["R", "AV", "AL", "EST", "ROD", "PRÇ", "VL"]

STREET_NAMES = [
    "Flores", "Palmeiras", "Ipê", "Jatobá", "Araçá", "Tucumã", "Brasil",
    "Santos Dumont", "Getúlio Vargas", "JK", "Amazonas", "Rui Barbosa",
    "Marechal Deodoro", "Principal", "Comercial", "Industrial", "Central",
    "Jatoba", "das Araras", "dos Bandeirantes", "Coronel Fawcett",
]

SECTORS = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]

UNITS = [1, 2, 3, 4, 5]

PRODUCT_NAMES = [
    "Arroz", "Feijão", "Macarrão", "Açúcar", "Café", "Leite", "Óleo",
    "Farinha", "Sal", "Carne", "Frango", "Peixe", "Pão", "Cerveja",
    "Refrigerante", "Suco", "Biscoito", "Chocolate", "Sorvete", "Sabão",
    "Detergente", "Desinfetante", "Papel Higiênico", "Shampoo", "Condicionador",
]

PRODUCT_VARIANTS = [
    "Tipo 1", "Premium", "Gold", "Silver", "Tradicional", "Especial",
    "Extra", "Super", "Master", "Light", "Integral", "Natural",
    "Original", "Fino", "Clássico", "Orgânico", "Zero", "Plus",
    "Mega", "Ultra", "Soft", "Fresh", "Tropical", "Gourmet",
]

PRODUCT_BRANDS = [
    "Nova Era", "Tradição", "Qualidade", "Campo Bom", "Delícia",
    "Saúde Total", "Sabor Perfeito", "MasterFood", "Naturalmente",
    "BomGosto", "AmigoDia", "CasaFeliz", "PuroBem", "DeliciaReal",
]

LAST_NAMES = [
    "Silva", "Santos", "Oliveira", "Souza", "Lima", "Pereira", "Ferreira",
    "Costa", "Rodrigues", "Almeida", "Nascimento", "Carvalho", "Gomes",
    "Martins", "Araújo", "Ribeiro", "Monteiro", "Cardoso", "Correia",
]

FIRST_NAMES = [
    "João", "Maria", "José", "Ana", "Pedro", "Paulo", "Carlos", "Marcos",
    "Lucas", "Mateus", "Gabriel", "Rafael", "Daniel", "Antônio", "Fernando",
    "Luiz", "Eduardo", "André", "Adriana", "Amanda", "Bruna", "Camila",
    "Carolina", "Cláudia", "Débora", "Diana", "Eliana", "Fernanda", "Gabriela",
]

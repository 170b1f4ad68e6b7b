"""Open Food Facts prompts - single source of truth for all LLM prompt text.

Two kinds of entries:
- sampling prompts (system + user templates) sent to the client's model
  by the analysis tools
- MCP prompt templates returned by ``prompts/get``

All templates use ``str.format`` placeholders.
"""

PROMPTS = {
    # ==========================================================================
    # Sampling: analyzeProduct
    # ==========================================================================
    "product_analysis_system": """You are a nutritional expert specializing in analyzing food products. \
Provide a detailed analysis of the product based on the Open Food Facts data. Include:

1. PRODUCT OVERVIEW: Basic details and classification
2. NUTRITION ANALYSIS: Review of nutritional data and what it means for dietary considerations
3. INGREDIENTS ASSESSMENT: Analysis of ingredients, highlighting potential concerns or benefits
4. ALLERGENS & RESTRICTIONS: Information relevant to dietary restrictions and allergies
5. HEALTH PERSPECTIVE: Overall assessment from a health and nutrition standpoint
6. RECOMMENDATIONS: Suggestions for consumers regarding this product""",
    "product_analysis": """Analyze this product from the Open Food Facts database and provide a detailed \
nutritional assessment:

{product_json}""",
    # ==========================================================================
    # Sampling: compareProducts
    # ==========================================================================
    "product_comparison_system": """You are a nutritional expert specializing in comparing food products. \
Provide a comprehensive comparison between two products based on their Open Food Facts data. \
Include the following sections:

1. OVERVIEW: Brief introduction to both products and what they are
2. NUTRITIONAL COMPARISON: Detailed side-by-side comparison of nutrients, highlighting significant differences
3. INGREDIENTS COMPARISON: Analysis of ingredients lists, highlighting differences and similarities
4. HEALTH RATING COMPARISON: Compare Nutri-Score, NOVA processing classification, and other health indicators
5. DIETARY CONSIDERATIONS: Compare allergens, dietary restrictions compatibility (vegan, vegetarian, etc.)
6. RECOMMENDATION: Which product might be preferable for different dietary needs and why""",
    "product_comparison": """Compare these two food products from the Open Food Facts database and provide a \
detailed nutritional comparison:

PRODUCT 1:
{product1_json}

PRODUCT 2:
{product2_json}""",
    # ==========================================================================
    # Sampling: suggestRecipes
    # ==========================================================================
    "recipe_suggestions_system": """You are a creative culinary nutritionist. Generate 4 recipe suggestions:
1. LOW-CALORIE: Light meal focusing on weight management
2. PROTEIN-RICH: Recipe for fitness enthusiasts
3. QUICK & EASY: Minimal prep and cooking time
4. FAMILY-FRIENDLY: Balanced meal for all ages

For each recipe, provide:
- Recipe name
- Ingredient list with measurements
- Brief preparation steps
- Approximate nutrition per serving
- Health benefit highlight""",
    "recipe_suggestions": """Generate recipe suggestions for {name} ({brand}). \
Nutritional profile: Energy {energy} kcal, Fat {fat}g, Proteins {proteins}g, Carbs {carbohydrates}g.

Category: {categories}
Ingredients: {ingredients}
Allergens: {allergens}""",
    # ==========================================================================
    # MCP prompt templates
    # ==========================================================================
    "analyze-product": """Analyze the food product "{barcode}". Provide a comprehensive nutritional analysis \
including health implications, ingredient quality, allergens, and dietary considerations.""",
    "compare-products": """Compare "{product1}" and "{product2}". Tell me which is healthier and why, \
comparing nutritional values, ingredients, and health scores.""",
    "find-healthy-alternatives": """I want healthier alternatives to "{product}". Search for similar products \
with better Nutri-Score ratings and fewer additives.""",
    "check-allergens": """Check if "{product}" is safe for someone allergic to: {allergens}. \
Include any traces warnings.""",
    "whats-for-dinner": """Suggest healthy recipe ideas using "{product}" as a main ingredient. \
Include nutritional tips.""",
    "check-additives": """Please check the food product with barcode {barcode} for any questionable additives \
or ingredients. Use the getAdditivesInfo tool to fetch the product's additives, then highlight any \
ingredients that may be concerning from a health perspective.""",
}

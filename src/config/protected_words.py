"""受保护词汇库 - 翻译时需要原样保留的专有名词."""

from typing import Dict, List

PROTECTED_WORDS_DATABASE: Dict[str, List[str]] = {
    "personal_names": [
        # 男性名
        "Aaron", "Adam", "Adrian", "Alan", "Albert", "Alex", "Alexander", "Allen",
        "Andrew", "Anthony", "Arthur", "Austin", "Benjamin", "Bill", "Blake",
        "Brandon", "Brian", "Bruce", "Bryan", "Carl", "Carlos", "Charles",
        "Christian", "Christopher", "Craig", "Daniel", "David", "Dean", "Dennis",
        "Douglas", "Drew", "Edward", "Eric", "Frank", "Gary", "George", "Grant",
        "Gregory", "Harold", "Harry", "Henry", "Jack", "James", "Jason", "Jeffrey",
        "Jeremy", "John", "Jonathan", "Joseph", "Joshua", "Justin", "Keith",
        "Kenneth", "Kevin", "Larry", "Lawrence", "Mark", "Matthew", "Michael",
        "Nicholas", "Patrick", "Paul", "Peter", "Philip", "Raymond", "Richard",
        "Robert", "Ronald", "Ryan", "Samuel", "Scott", "Sean", "Stephen", "Steven",
        "Thomas", "Timothy", "William", "Zachary",
        # 女性名
        "Amanda", "Amy", "Andrea", "Angela", "Anna", "Ashley", "Barbara", "Betty",
        "Brenda", "Carol", "Carolyn", "Catherine", "Christine", "Cynthia",
        "Deborah", "Debra", "Diana", "Donna", "Dorothy", "Elizabeth", "Emily",
        "Emma", "Evelyn", "Frances", "Helen", "Janet", "Janice", "Jean",
        "Jennifer", "Jessica", "Joan", "Joyce", "Judith", "Julie", "Karen",
        "Kathleen", "Kathryn", "Kelly", "Kimberly", "Laura", "Linda", "Lisa",
        "Margaret", "Maria", "Marie", "Martha", "Mary", "Melissa", "Michelle",
        "Nancy", "Nicole", "Olivia", "Pamela", "Patricia", "Rachel", "Rebecca",
        "Ruth", "Sandra", "Sarah", "Sharon", "Stephanie", "Susan", "Teresa",
        "Virginia", "Wendy",
        # 容易被直译的名字
        "Harsh", "Rocky", "Lucky", "Honey", "Deep", "Rose", "Sunny", "Jasmine",
        "Crystal", "Amber", "Brandy", "Brooks", "Clay", "Cliff", "Duke", "Forrest",
        "Hunter", "Lance", "Miles", "Reed", "Rob", "Roman", "Rusty", "Sky",
        "Stone", "Wade", "Woody", "Blaze", "Chase", "Chip", "Colt", "Dash", "Jett",
        "Link", "Cash", "King", "Legend", "Major", "Reign", "Royal", "Saint",
        "Wilder", "Zen", "Angel", "Blue", "Cricket", "Destiny", "Faith", "Grace",
        "Harmony", "Haven", "Heaven", "Honor", "Hope", "Journey", "Joy", "Justice",
        "Liberty", "Melody", "Mercy", "Patience", "Peace", "Precious", "Serenity",
        "Trinity", "True", "Wisdom", "Winter", "August", "Genesis", "Noel",
        "Paris", "Reagan", "Zion",
    ],
    "company_names": [
        "Apple", "Microsoft", "Google", "Amazon", "Facebook", "Meta", "Netflix",
        "Tesla", "Samsung", "Sony", "Nike", "Adidas", "Coca-Cola", "Pepsi",
        "McDonald's", "Starbucks", "Walmart", "Target", "IBM", "Intel", "AMD",
        "NVIDIA", "Oracle", "Salesforce", "Adobe", "Uber", "Airbnb", "PayPal",
        "Visa", "MasterCard", "American Express", "Goldman Sachs", "JPMorgan",
        "Morgan Stanley", "Ford", "BMW", "Mercedes", "Audi", "Toyota", "Honda",
        "Volkswagen", "Ferrari", "Lamborghini", "Rolex", "Gucci", "Louis Vuitton",
        "Prada", "Chanel", "Versace", "Armani", "Burberry",
    ],
    "place_names": [
        "Austin", "Dallas", "Houston", "Phoenix", "Denver", "Portland", "Seattle",
        "Atlanta", "Miami", "Orlando", "Tampa", "Nashville", "Memphis",
        "Charlotte", "Raleigh", "Virginia", "Georgia", "Carolina", "Montana",
        "Dakota", "Nevada", "Arizona", "Colorado", "Indiana", "Maryland",
        "Delaware", "Connecticut", "Vermont", "Maine", "Alaska", "Hawaii", "Utah",
        "Idaho", "Wyoming", "London", "Paris", "Berlin", "Rome", "Madrid",
        "Vienna", "Prague", "Dublin", "Edinburgh", "Glasgow", "Cardiff",
        "Belfast", "Amsterdam", "Brussels", "Geneva", "Zurich", "Stockholm",
        "Oslo", "Helsinki", "Copenhagen", "Warsaw", "Budapest", "Bucharest",
        "Sofia", "Zagreb", "Athens", "Istanbul", "Moscow", "Kiev", "Minsk",
        "Riga", "Vilnius", "Tallinn",
    ],
    "object_names": [
        "Boat", "River", "Lake", "Ocean", "Mountain", "Valley", "Forest", "Desert",
        "Island", "Beach", "Storm", "Thunder", "Lightning", "Rain", "Snow", "Ice",
        "Fire", "Flame", "Spark", "Ember", "Star", "Moon", "Sun", "Cloud", "Wind",
        "Wave", "Tide", "Current", "Stream", "Brook", "Diamond", "Ruby", "Emerald",
        "Sapphire", "Pearl", "Gold", "Silver", "Platinum", "Bronze", "Copper",
    ],
}


def get_all_protected_words() -> List[str]:
    """返回所有类别的受保护词汇（可能包含跨类别重复）."""
    words: List[str] = []
    for category in ("personal_names", "company_names", "place_names", "object_names"):
        words.extend(PROTECTED_WORDS_DATABASE[category])
    return words

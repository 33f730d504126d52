"""Static catalog of daily eco challenges."""

from __future__ import annotations

from greenpath_app.core.models import Challenge

DAILY_CHALLENGES: tuple[Challenge, ...] = (
    # Water
    Challenge(
        id="shorter_shower",
        title="5-Minute Shower Challenge",
        description="Take a shower under 5 minutes today",
        tip="Play a short song to time yourself!",
        category="water",
        xp_reward=30,
        difficulty="easy",
        impact_metric="Saves ~10 gallons of water",
    ),
    Challenge(
        id="turn_off_tap",
        title="Tap Guardian",
        description="Turn off the tap while brushing teeth and washing hands",
        tip="You can save 8 gallons per day just from brushing!",
        category="water",
        xp_reward=20,
        difficulty="easy",
        impact_metric="Saves ~8 gallons of water",
    ),
    Challenge(
        id="full_load_laundry",
        title="Full Load Only",
        description="Only run washing machine with a full load",
        tip="Wait until you have enough clothes for a complete load",
        category="water",
        xp_reward=25,
        difficulty="easy",
        impact_metric="Saves ~20 gallons per load",
    ),
    # Energy
    Challenge(
        id="unplug_devices",
        title="Phantom Power Hunter",
        description="Unplug 5 devices not in use to eliminate phantom power",
        tip="Check chargers, TVs, and kitchen appliances",
        category="energy",
        xp_reward=35,
        difficulty="easy",
        impact_metric="Saves ~0.5 kWh daily",
    ),
    Challenge(
        id="natural_light",
        title="Sunshine Day",
        description="Use only natural light until sunset",
        tip="Open curtains and blinds to maximize daylight",
        category="energy",
        xp_reward=40,
        difficulty="medium",
        impact_metric="Saves ~1 kWh of electricity",
    ),
    Challenge(
        id="thermostat_adjust",
        title="Temperature Tweak",
        description="Adjust thermostat 2°F closer to outside temperature",
        tip="Layer up in winter, dress light in summer",
        category="energy",
        xp_reward=45,
        difficulty="medium",
        impact_metric="Reduces heating/cooling by 6%",
    ),
    Challenge(
        id="led_switch",
        title="LED Champion",
        description="Replace one incandescent bulb with LED",
        tip="LEDs use 75% less energy and last 25x longer",
        category="energy",
        xp_reward=50,
        difficulty="medium",
        impact_metric="Saves ~$75 over bulb lifetime",
    ),
    # Waste
    Challenge(
        id="zero_plastic",
        title="Plastic-Free Morning",
        description="Avoid single-use plastics until noon",
        tip="Use reusable water bottle, containers, and bags",
        category="waste",
        xp_reward=40,
        difficulty="medium",
        impact_metric="Prevents ~5 plastic items from waste",
    ),
    Challenge(
        id="compost_today",
        title="Compost Champion",
        description="Compost all food scraps from meals today",
        tip="Fruit peels, veggie scraps, coffee grounds all work!",
        category="waste",
        xp_reward=35,
        difficulty="medium",
        impact_metric="Diverts ~1 lb from landfill",
    ),
    Challenge(
        id="repair_item",
        title="Fix It First",
        description="Repair something instead of throwing it away",
        tip="Sew a button, fix a tear, or glue something broken",
        category="waste",
        xp_reward=60,
        difficulty="hard",
        impact_metric="Extends item life significantly",
    ),
    Challenge(
        id="declutter_donate",
        title="Declutter & Donate",
        description="Find 5 items to donate instead of trash",
        tip="Clothes, books, and kitchenware are always needed",
        category="waste",
        xp_reward=50,
        difficulty="medium",
        impact_metric="Gives items second life",
    ),
    # Transport
    Challenge(
        id="walk_errands",
        title="Walk It Out",
        description="Walk instead of drive for one errand today",
        tip="Great for short trips under 1 mile",
        category="transport",
        xp_reward=45,
        difficulty="medium",
        impact_metric="Saves ~1 lb CO2 per mile",
    ),
    Challenge(
        id="bike_commute",
        title="Pedal Power",
        description="Use a bike for transportation today",
        tip="Even a short bike ride makes a difference",
        category="transport",
        xp_reward=55,
        difficulty="medium",
        impact_metric="Zero emissions transport",
    ),
    Challenge(
        id="carpool_day",
        title="Carpool Connection",
        description="Share a ride with someone today",
        tip="Coordinate with coworkers or neighbors",
        category="transport",
        xp_reward=50,
        difficulty="medium",
        impact_metric="Cuts emissions in half",
    ),
    Challenge(
        id="public_transit",
        title="Transit Rider",
        description="Use public transportation instead of driving",
        tip="Buses and trains are much more efficient per person",
        category="transport",
        xp_reward=45,
        difficulty="medium",
        impact_metric="Saves ~20 lbs CO2 vs driving",
    ),
    # Food
    Challenge(
        id="meatless_meal",
        title="Meatless Meal",
        description="Enjoy one completely plant-based meal today",
        tip="Try a veggie stir-fry, salad, or pasta primavera",
        category="food",
        xp_reward=35,
        difficulty="easy",
        impact_metric="Saves ~6 lbs CO2 equivalent",
    ),
    Challenge(
        id="local_food",
        title="Local Foodie",
        description="Buy or eat something produced locally",
        tip="Check farmers markets or local sections in stores",
        category="food",
        xp_reward=40,
        difficulty="medium",
        impact_metric="Reduces food miles significantly",
    ),
    Challenge(
        id="no_food_waste",
        title="Clean Plate Club",
        description="Eat all leftovers and avoid food waste today",
        tip="Plan portions carefully and save extras",
        category="food",
        xp_reward=30,
        difficulty="easy",
        impact_metric="Prevents food waste emissions",
    ),
    Challenge(
        id="reusable_cup",
        title="BYOC (Bring Your Own Cup)",
        description="Use a reusable cup for all beverages today",
        tip="Keep one in your bag or car for convenience",
        category="food",
        xp_reward=25,
        difficulty="easy",
        impact_metric="Saves 1-3 disposable cups",
    ),
    # Lifestyle
    Challenge(
        id="eco_learning",
        title="Eco Education",
        description="Learn one new fact about sustainability today",
        tip="Read an article, watch a documentary clip, or take a quiz!",
        category="lifestyle",
        xp_reward=25,
        difficulty="easy",
        impact_metric="Knowledge is power!",
    ),
    Challenge(
        id="share_knowledge",
        title="Spread the Word",
        description="Share an eco-tip with a friend or family member",
        tip="Personal conversations make the biggest impact",
        category="lifestyle",
        xp_reward=40,
        difficulty="easy",
        impact_metric="Multiplies your impact",
    ),
    Challenge(
        id="air_dry_clothes",
        title="Sun-Dried Fresh",
        description="Air dry your clothes instead of using the dryer",
        tip="Use a drying rack or clothesline",
        category="lifestyle",
        xp_reward=45,
        difficulty="medium",
        impact_metric="Saves ~3 kWh per load",
    ),
    Challenge(
        id="secondhand_first",
        title="Secondhand First",
        description="Check thrift stores before buying new",
        tip="Great for clothes, books, furniture, and more",
        category="lifestyle",
        xp_reward=50,
        difficulty="medium",
        impact_metric="Reduces manufacturing demand",
    ),
)

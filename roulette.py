### READ THIS ###
# a few names used throughout this file:

# CHARGE: a single shell in the shotgun, either live (does damage) or blank (harmless).
# MAGAZINE: the ordered charges currently loaded.  the front of the list is always the next one to fire.
# LOAD: when the shotgun is filled with some amount of live and blank charges.  players take turns until it's empty or someone is eliminated.
# ROUND: two players, one shared shotgun, played out load by load until only one player has lives left.

### ACTUAL CODE NOW ###
import os
import sys
import random
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

## GLOBAL GAME SETTINGS ##

min_shells_per_load = 2
max_shells_per_load = 8

min_lives = 2
max_lives = 4

max_items_total = 8

min_items_per_load = 2
max_items_per_load = 5

base_live_damage = 1
sawed_live_damage = 2

log_level_env_var = "ROULETTE_LOG_LEVEL"

## exceptions ##

# base for everything the engine raises.  none of these are fatal, the driver decides what to do with them
class GameException(Exception):
    pass

# tried to fire, peek or eject with nothing loaded
class EmptyMagazineException(GameException):
    pass

# item isn't in the acting player's inventory
class ItemNotHeldException(GameException):
    pass

# bad item name, or the item can't be used right now
class InvalidItemException(GameException):
    pass

# missing target, eliminated target or a target that makes no sense for the item
class InvalidTargetException(GameException):
    pass

# action attempted after the round already ended
class RoundOverException(GameException):
    pass

# the round ended because the magazine ran dry.  drivers catching either the round or the magazine condition see it
class MagazineSpentException(RoundOverException, EmptyMagazineException):
    pass

# the debugging shell didn't understand a line of input
class UnknownCommandException(GameException):
    pass

## value types ##

class Charge(Enum):
    LIVE = "live"
    BLANK = "blank"

    def is_live(self):
        return self is Charge.LIVE

    def is_blank(self):
        return self is Charge.BLANK

    def __str__(self):
        return self.value

class Item(Enum):
    SAW = "saw"
    MAGNIFIER = "magnifier"
    BEER = "beer"
    HANDCUFFS = "handcuffs"
    CIGARETTE = "cigarette"

    # accepts an Item or its (case insensitive) name
    @classmethod
    def from_name(cls, name):
        if isinstance(name, cls):
            return name

        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise InvalidItemException("Invalid item " + str(name)) from None

    def __str__(self):
        return self.value

all_items = list(Item)

# hard caps on how many of each item a player may hold after items are dealt
default_item_limits = {
    Item.SAW: 3,
    Item.MAGNIFIER: 3,
    Item.BEER: 2,
    Item.HANDCUFFS: 1,
    Item.CIGARETTE: 1,
}

# result of a single trigger pull.  damage_applied is what was actually taken off the target, so it's never more than the life they had
@dataclass(frozen=True)
class DischargeOutcome:
    charge_fired: Charge
    damage_applied: int

# result of using an item.  charge is only set for items that see or move a charge (magnifier, beer)
@dataclass(frozen=True)
class ItemOutcome:
    item: Item
    charge: Charge = None

## utility methods ##

# create a random magazine.  same rules as the real thing:
# 1. there can be between 2 and 8 charges.
# 2. the number of live charges is the total divided by 2 and rounded down, with the rest being blanks.
# 3. the charges are arranged in a completely random order.
def random_magazine(rng):
    total_shells = rng.randint(min_shells_per_load, max_shells_per_load)

    num_live = total_shells // 2
    num_blank = total_shells - num_live

    magazine = [Charge.LIVE] * num_live + [Charge.BLANK] * num_blank
    rng.shuffle(magazine)

    return magazine

# lives are a random number between 2 and 4
def random_lives(rng):
    return rng.randint(min_lives, max_lives)

# lives and damage are whole, non-negative numbers.  anything else would let lives go below zero
def check_amount(amount, what):
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise ValueError(what + " must be a non-negative integer, got " + repr(amount))

## classes ##

# multiset of items.  order is kept (first come first served when capping) but otherwise doesn't matter
class Inventory():
    # draw up to num random items.
    # limits is also an inventory of items.  it gives limits to the number of items that can be in the random inventory.  if limits is None, then no limits are applied.
    @staticmethod
    def random_items(num, rng, limits=None):
        random_inventory = Inventory()

        # how many more of each item may still be drawn, None meaning no limit
        if limits is None:
            room = {item: None for item in all_items}
        else:
            room = {item: count for item, count in limits.as_dict().items() if count > 0}

        while len(random_inventory) < num and room:
            random_item = rng.choice(list(room))
            random_inventory.add_item(random_item)

            if not room[random_item] is None:
                room[random_item] -= 1
                if room[random_item] == 0:
                    del room[random_item]

        return random_inventory

    def __init__(self, items=None, max_items=None):
        self.max_items = max_items

        self.reset()

        if not items is None:
            for item in items:
                self.add_item(item)

    def has_item(self, item):
        return Item.from_name(item) in self.items

    def __contains__(self, item):
        return self.has_item(item)

    def __iter__(self):
        return iter(list(self.items))

    def __len__(self):
        return len(self.items)

    def __str__(self):
        return str({str(item): count for item, count in self.as_dict().items()})

    def reset(self):
        self.items = list()

    def as_dict(self):
        return {item: self.item_count(item) for item in all_items}

    def item_count(self, item):
        return self.items.count(Item.from_name(item))

    # adds count copies of item.  anything past max_items is dropped
    def add_item(self, item, count=1):
        self.items += [Item.from_name(item)] * count

        if not self.max_items is None:
            self.items = self.items[:self.max_items]

    def add_inventory(self, inventory):
        for item in inventory:
            self.add_item(item)

    def consume_item(self, item):
        item = Item.from_name(item)

        if not self.has_item(item):
            raise ItemNotHeldException(str(item) + " is not in inventory")

        self.items.remove(item)

# the shotgun.  it's shared by both players but only ever touched by whoever is acting
class Weapon():
    def __init__(self):
        # the current charges, front is next to fire
        self.magazine = []

        # is the end of the barrel currently sawed off?  only lasts for one trigger pull
        self.sawed = False

    # replace whatever is loaded with the given charges.  if rng is passed the new magazine is shuffled once, which is the only time order ever changes
    def load(self, magazine, rng=None):
        self.magazine = [Charge(charge) for charge in magazine]
        self.sawed = False

        if not rng is None:
            self.randomize(rng)

        logger.debug("loaded %d charges (%d live, %d blank)", self.remaining_count(), self.num_live(), self.num_blank())

    def randomize(self, rng):
        rng.shuffle(self.magazine)

    def remaining_count(self):
        return len(self.magazine)

    def is_empty(self):
        return len(self.magazine) == 0

    def num_live(self):
        return self.magazine.count(Charge.LIVE)

    def num_blank(self):
        return self.magazine.count(Charge.BLANK)

    def is_sawed(self):
        return self.sawed

    def saw(self):
        self.sawed = True

    def check_not_empty(self):
        if self.is_empty():
            raise EmptyMagazineException("no charges left in the magazine")

    # returns the next charge without removing it from the magazine
    def peek_next(self):
        self.check_not_empty()

        return self.magazine[0]

    # removes the next charge without firing it and returns it
    def eject_next(self):
        self.check_not_empty()

        charge = self.magazine.pop(0)
        logger.debug("ejected %s charge, %d left", charge, self.remaining_count())

        return charge

    # get the given charge's damage accounting for the saw
    def damage_for(self, charge):
        if charge.is_blank():
            return 0
        elif self.sawed:
            return sawed_live_damage
        else:
            return base_live_damage

    # fire the next charge at target.  this is the only way anyone ever loses lives
    def discharge(self, target):
        self.check_not_empty()

        charge = self.magazine.pop(0)
        damage = target.take_damage(self.damage_for(charge))

        # always resets, live or blank
        self.sawed = False

        logger.debug("%s charge fired at %s for %d damage, %d left", charge, target.name, damage, self.remaining_count())

        return DischargeOutcome(charge, damage)

# one of the two people at the table
class Player():
    def __init__(self, name, lives, inventory=None):
        check_amount(lives, "lives")

        self.name = name
        self.lives = lives

        # skip the next turn when set.  the driver clears it when it's consumed
        self.restrained = False

        self.inventory = Inventory(max_items=max_items_total)

        if not inventory is None:
            self.give_items(inventory)

        # the next charge as revealed by a magnifier, or None if this player doesn't know it
        self.known_next = None

    def __repr__(self):
        return "Player(" + repr(self.name) + ", lives=" + str(self.lives) + ")"

    # saturating, lives never go below zero.  returns how much was actually taken
    def take_damage(self, damage):
        check_amount(damage, "damage")

        taken = min(damage, self.lives)
        self.lives -= taken

        return taken

    def give_lives(self, amount):
        check_amount(amount, "lives")

        self.lives += amount

    def is_eliminated(self):
        return self.lives == 0

    def is_restrained(self):
        return self.restrained

    def restrain(self):
        self.restrained = True

    def clear_restraint(self):
        self.restrained = False

    def forget_known(self):
        self.known_next = None

    def give_items(self, items):
        for item in items:
            self.inventory.add_item(item)

    def has_item(self, item):
        return self.inventory.has_item(item)

    # everything that could make the item fail gets checked here, before anything is consumed or changed
    def check_item_usable(self, item, weapon, target):
        if not self.has_item(item):
            raise ItemNotHeldException(str(item) + " isn't in " + self.name + "'s inventory")

        if item is Item.SAW and weapon.is_sawed():
            raise InvalidItemException("can't saw twice")

        if item is Item.MAGNIFIER or item is Item.BEER:
            weapon.check_not_empty()

        if item is Item.HANDCUFFS:
            if target is None:
                raise InvalidTargetException("handcuffs need a target")
            if target is self:
                raise InvalidTargetException("can't handcuff yourself")
            if target.is_eliminated():
                raise InvalidTargetException(target.name + " is already eliminated")
            # can't handcuff twice
            if target.is_restrained():
                raise InvalidItemException(target.name + " is already handcuffed")

    # use one of the given item on weapon (and target, for handcuffs).  either the whole effect happens or nothing does
    def apply_item(self, item, weapon, target=None):
        item = Item.from_name(item)

        self.check_item_usable(item, weapon, target)
        self.inventory.consume_item(item)

        outcome = item_behaviors[item](self, weapon, target)

        logger.debug("%s used %s", self.name, item)

        return outcome

## item behaviors ##
# all item behaviors take the user, the shared weapon and an optional target.
# preconditions were already checked by Player.apply_item, so these only apply the effect.

def saw_behavior(user, weapon, target):
    weapon.saw()

    return ItemOutcome(Item.SAW)

def magnifier_behavior(user, weapon, target):
    user.known_next = weapon.peek_next()

    return ItemOutcome(Item.MAGNIFIER, user.known_next)

def beer_behavior(user, weapon, target):
    return ItemOutcome(Item.BEER, weapon.eject_next())

def handcuffs_behavior(user, weapon, target):
    target.restrain()

    return ItemOutcome(Item.HANDCUFFS)

# no cap here, the round enforces it
def cigarette_behavior(user, weapon, target):
    user.give_lives(1)

    return ItemOutcome(Item.CIGARETTE)

item_behaviors = {
    Item.SAW: saw_behavior,
    Item.MAGNIFIER: magnifier_behavior,
    Item.BEER: beer_behavior,
    Item.HANDCUFFS: handcuffs_behavior,
    Item.CIGARETTE: cigarette_behavior,
}

# a round between exactly two players sharing one weapon.  handles whose turn it is, handcuff skips and when it's over
class Round():
    def __init__(self, players, weapon=None, rng=None):
        players = list(players)

        if len(players) != 2:
            raise ValueError("a round needs exactly two players")

        self.players = players
        self.weapon = Weapon() if weapon is None else weapon
        self.rng = random.Random() if rng is None else rng

        # cigarettes can't heal past what anyone started with
        self.max_lives = max(player.lives for player in players)

        # who has the gun?
        self.turn_index = 0

        # the last charge fired, or None if nothing has been fired yet
        self.last_charge_fired = None

    def current_player(self):
        return self.players[self.turn_index]

    def opponent(self):
        return self.players[(self.turn_index + 1) % len(self.players)]

    def remaining_count(self):
        return self.weapon.remaining_count()

    def alive_players(self):
        return [player for player in self.players if not player.is_eliminated()]

    def is_over(self):
        return self.weapon.is_empty() or len(self.alive_players()) <= 1

    # the last one standing, or None if nobody or everybody is
    def winner(self):
        alive = self.alive_players()

        if len(alive) == 1:
            return alive[0]

        return None

    def check_not_over(self):
        if len(self.alive_players()) <= 1:
            raise RoundOverException("the round is over")
        if self.weapon.is_empty():
            raise MagazineSpentException("the magazine is empty, reload first")

    def forget_all_known(self):
        for player in self.players:
            player.forget_known()

    # load a fresh magazine (random if none given), shuffled with this round's rng.  first player always starts a load
    def load(self, magazine=None):
        if magazine is None:
            magazine = random_magazine(self.rng)

        self.weapon.load(magazine, rng=self.rng)
        self.forget_all_known()

        self.last_charge_fired = None

        # hand the turn to the first player, going through advance_turn so a player still cuffed from the last load sits this one out
        self.turn_index = len(self.players) - 1
        self.advance_turn()

    # give each player the same number of random items, keeping under the per-item limits
    def deal_items(self, num=None):
        if num is None:
            num = self.rng.randint(min_items_per_load, max_items_per_load)

        for player in self.players:
            limits = Inventory()

            for item, limit in default_item_limits.items():
                limits.add_item(item, count=max(0, limit - player.inventory.item_count(item)))

            player.give_items(Inventory.random_items(num, self.rng, limits=limits))

    # whoever has the turn uses the named item.  handcuffs go on the opponent unless told otherwise.
    # using an item doesn't end the turn
    def use_item(self, item, target=None):
        self.check_not_over()

        item = Item.from_name(item)
        user = self.current_player()

        if item is Item.HANDCUFFS and target is None:
            target = self.opponent()

        outcome = user.apply_item(item, self.weapon, target)

        if item is Item.CIGARETTE:
            user.lives = min(user.lives, self.max_lives)
        elif item is Item.BEER:
            # the ejected charge is gone, so whatever anyone knew about the next one is stale
            self.forget_all_known()

        return outcome

    # whoever has the turn fires, at themselves or the opponent, and the turn passes
    def shoot(self, at_self):
        self.check_not_over()

        shooter = self.current_player()
        target = shooter if at_self else self.opponent()

        outcome = self.weapon.discharge(target)

        self.last_charge_fired = outcome.charge_fired
        self.forget_all_known()

        logger.debug("%s shot %s", shooter.name, "themselves" if at_self else target.name)

        if not self.is_over():
            self.advance_turn()

        return outcome

    # pass the turn on.  a restrained player gets uncuffed and skipped once, eliminated players are skipped entirely
    def advance_turn(self):
        count = len(self.players)
        next_index = (self.turn_index + 1) % count

        for i in range(count):
            player = self.players[next_index]

            if player.is_eliminated():
                pass
            elif player.is_restrained():
                player.clear_restraint()
                logger.debug("%s is handcuffed, skipping their turn", player.name)
            else:
                break

            next_index = (next_index + 1) % count

        self.turn_index = next_index

        logger.debug("turn passes to %s", self.current_player().name)

# simple wrapper around a single round.  mostly for debugging, not really intended to be fun gameplay.
help_text = "commands: me, you, use <item>, help"

def print_status(game):
    for player in game.players:
        print(player.name + ": " + str(player.lives) + " lives, items: " + str(player.inventory))

    print("charges left: " + str(game.remaining_count()) + " (" + str(game.weapon.num_live()) + " live)")

# turn a line of input into ("shoot", at_self), ("use", item) or ("help", None).  raises UnknownCommandException for nonsense
def parse_command(line):
    words = line.strip().lower().split()

    if words == ["me"]:
        return "shoot", True
    elif words == ["you"]:
        return "shoot", False
    elif len(words) == 2 and words[0] == "use":
        return "use", Item.from_name(words[1])
    elif words == ["help"]:
        return "help", None

    raise UnknownCommandException("unknown command " + repr(line.strip()))

# level name from the environment, falling back to WARNING for anything logging doesn't know
def log_level_from_env(environ=os.environ):
    name = environ.get(log_level_env_var, "WARNING").strip().upper()
    level = logging.getLevelName(name)

    if not isinstance(level, int):
        logger.warning("unknown log level %r in %s, using WARNING", name, log_level_env_var)
        return logging.WARNING

    return level

def main(argv):
    logging.basicConfig(level=log_level_from_env())

    seed = int(argv[1]) if len(argv) > 1 else None
    rng = random.Random(seed)

    lives = random_lives(rng)
    game = Round([Player("a", lives), Player("b", lives)], rng=rng)

    print(help_text)

    while game.winner() is None:
        if game.weapon.is_empty():
            game.load()
            game.deal_items()
            print("reloaded")

        print_status(game)
        print("current: " + game.current_player().name)

        try:
            command, arg = parse_command(input("> "))

            if command == "shoot":
                outcome = game.shoot(at_self=arg)
                print("charge was " + str(outcome.charge_fired))
            elif command == "use":
                outcome = game.use_item(arg)
                if not outcome.charge is None:
                    print(str(arg) + " shows " + str(outcome.charge))
            else:
                print(help_text)
        except GameException as e:
            print(e)
        except EOFError:
            return 1

    print(game.winner().name + " wins!")

    return 0

# console script entry point
def cli():
    sys.exit(main(sys.argv))

if __name__ == "__main__":
    cli()
